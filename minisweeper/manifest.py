"""Mini app manifest served under /.well-known."""
from minisweeper import config


def build_manifest(app_url: str) -> dict:
    app_url = app_url.rstrip('/')
    return {
        'accountAssociation': {
            'header': config.MANIFEST_HEADER,
            'payload': config.MANIFEST_PAYLOAD,
            'signature': config.MANIFEST_SIGNATURE,
        },
        'frame': {
            'name': 'Minesweeper',
            'version': '1',
            'iconUrl': f'{app_url}/icon.png',
            'homeUrl': f'{app_url}/',
            'subtitle': 'Minesweeper game',
            'primaryCategory': 'games',
            'description': 'Classic Minesweeper as a mini app: quick taps, smart flags, '
                           'timed runs, and rankings across three difficulties.',
            'splashBackgroundColor': '#000000',
            'splashImageUrl': f'{app_url}/splash.png',
            'tags': ['minesweeper', 'game', 'puzzle'],
        },
    }
