cloudflare_cache_headers = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': '*',
    'Cache-Control': 'no-cache, no-store, must-revalidate',
    'Pragma': 'no-cache',
    'Expires': '0',
    'Surrogate-Control': 'no-store'
}

# Catalog responses may be cached by Stremio for an hour
catalog_cache_headers = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': '*',
    'Cache-Control': 'max-age=3600',
}

webshare_headers = {
    'content-type': 'application/x-www-form-urlencoded; charset=UTF-8',
    'accept': 'text/xml; charset=UTF-8',
}

ADDON_ID = 'community.coffei.webshare'
ID_PREFIX = 'webshare:'
# Ids issued by earlier releases of the addon
LEGACY_ID_PREFIX = 'coffei.webshare:'
STREAM_NAME = 'Webshare'

# Link redirects stay valid for five hours
LINK_CACHE_SECONDS = 5 * 60 * 60

manifest = {
    'id': ADDON_ID,
    'name': 'Webshare.cz',
    'description': 'Simple webshare.cz search and streaming.',
    'resources': [
        {'name': 'stream', 'types': ['movie', 'series'], 'idPrefixes': ['tt', ID_PREFIX, LEGACY_ID_PREFIX, 'tmdb:']},
        {'name': 'catalog', 'types': ['movie', 'series'], 'idPrefixes': [ID_PREFIX]},
        {'name': 'meta', 'types': ['movie', 'series'], 'idPrefixes': [ID_PREFIX, LEGACY_ID_PREFIX]},
    ],
    'types': ['movie', 'series'],
    'catalogs': [
        {
            'id': 'direct',
            'type': 'movie',
            'name': 'Webshare Files',
            'extra': [{'name': 'search', 'isRequired': True}],
        }
    ],
    'idPrefixes': ['tt', ID_PREFIX, LEGACY_ID_PREFIX],
    'behaviorHints': {'configurable': True, 'configurationRequired': True},
    'config': [
        {'key': 'login', 'type': 'text', 'title': 'Webshare.cz login - username or email', 'required': True},
        {'key': 'password', 'type': 'password', 'title': 'Webshare.cz password', 'required': True},
        {
            'key': 'sortMethod',
            'type': 'select',
            'title': 'Sort streams by',
            'options': ['votes', 'filesize', 'resolution'],
            'default': 'votes',
            'required': False,
        },
    ],
}
