#!/usr/bin/env python3
"""
GameStore Server - REST API for game catalog records
CRUD routes over the games table, a bulk import of the Android and iOS
top-100 catalogs, static files and API docs.
"""

import logging
import argparse
import os
import sys
from typing import Dict

from colorama import init, Fore, Style
from dotenv import load_dotenv
from flask import Flask, jsonify, request

import database
import gamestore
from app.repositories import GameRepository, GameNotFoundError
from app.services import GameService, CatalogReconciler
from app.services.catalog_reconciler import PLATFORM_ANDROID, PLATFORM_IOS
from platform_clients import CatalogSourceClient, CatalogFetchError

load_dotenv()
init(autoreset=True)

# Initialize logging early so database module logs are captured
log_level = os.getenv('GAMESTORE_LOG_LEVEL', 'INFO')
gamestore_logger = gamestore.setup_logging(log_level)
server_logger = logging.getLogger('gamestore.server')

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'static')

app = Flask(__name__, static_folder=STATIC_DIR, static_url_path='')

# Active configuration; replaced by main() after loading config.json
config: Dict = dict(gamestore.DEFAULT_CONFIG)

DB_AVAILABLE = False


def ensure_db_available() -> bool:
    """Try to (re)initialize DB if it was previously unavailable."""
    global DB_AVAILABLE
    if DB_AVAILABLE:
        return True
    try:
        DB_AVAILABLE = database.init_db()
        if DB_AVAILABLE:
            server_logger.info('Database connected successfully')
        return DB_AVAILABLE
    except Exception as e:
        server_logger.exception('Database connect failed: %s', e)
        return False


def _db_unavailable():
    return jsonify({'error': 'Database not available'}), 503


def build_reconciler(repository: GameRepository) -> CatalogReconciler:
    """Create a reconciler for the catalog URLs in the active config."""
    timeout = config.get('fetch_timeout', 10)
    android = CatalogSourceClient(config['android_catalog_url'], PLATFORM_ANDROID, timeout=timeout)
    ios = CatalogSourceClient(config['ios_catalog_url'], PLATFORM_IOS, timeout=timeout)
    return CatalogReconciler(repository, android, ios)


# ---------------------------------------------------------------------------
# Static pages
# ---------------------------------------------------------------------------

@app.route('/')
def index():
    """Main page"""
    return app.send_static_file('index.html')


# ---------------------------------------------------------------------------
# Games
# ---------------------------------------------------------------------------

@app.route('/api/games', methods=['GET'])
def api_list_games():
    """Get all games"""
    if not ensure_db_available():
        return _db_unavailable()
    try:
        db = database.get_session()
        try:
            games = GameService(GameRepository(db)).list_games()
            return jsonify([g.to_dict() for g in games])
        finally:
            db.close()
    except Exception as e:
        server_logger.error(f"There was an error querying games: {e}")
        return jsonify({'error': 'Failed to load games'}), 500


@app.route('/api/games', methods=['POST'])
def api_create_game():
    """Create a game from the JSON body"""
    if not ensure_db_available():
        return _db_unavailable()
    data = request.get_json(silent=True) or {}
    try:
        db = database.get_session()
        try:
            game = GameService(GameRepository(db)).create(data)
            return jsonify(game.to_dict())
        finally:
            db.close()
    except Exception as e:
        server_logger.error(f"There was an error creating a game: {e}")
        return jsonify({'error': 'Failed to create game', 'details': str(e)}), 400


@app.route('/api/games/<int:game_id>', methods=['PUT'])
def api_update_game(game_id):
    """Replace every field of a game"""
    if not ensure_db_available():
        return _db_unavailable()
    data = request.get_json(silent=True) or {}
    try:
        db = database.get_session()
        try:
            game = GameService(GameRepository(db)).replace(game_id, data)
            return jsonify(game.to_dict())
        finally:
            db.close()
    except GameNotFoundError as e:
        return jsonify({'error': str(e)}), 404
    except Exception as e:
        server_logger.error(f"Error updating game {game_id}: {e}")
        return jsonify({'error': 'Failed to update game', 'details': str(e)}), 400


@app.route('/api/games/<int:game_id>', methods=['DELETE'])
def api_delete_game(game_id):
    """Hard-delete a game"""
    if not ensure_db_available():
        return _db_unavailable()
    try:
        db = database.get_session()
        try:
            GameService(GameRepository(db)).delete(game_id)
            return jsonify({'id': game_id})
        finally:
            db.close()
    except GameNotFoundError as e:
        return jsonify({'error': str(e)}), 404
    except Exception as e:
        server_logger.error(f"Error deleting game {game_id}: {e}")
        return jsonify({'error': 'Failed to delete game', 'details': str(e)}), 400


@app.route('/api/games/search', methods=['POST'])
def api_search_games():
    """Search games by partial name and exact platform"""
    if not ensure_db_available():
        return _db_unavailable()
    data = request.get_json(silent=True) or {}
    try:
        db = database.get_session()
        try:
            games = GameService(GameRepository(db)).search(
                data.get('name'), data.get('platform'))
            return jsonify([g.to_dict() for g in games])
        finally:
            db.close()
    except Exception as e:
        server_logger.error(f"Failed to execute search on games: {e}")
        return jsonify({'error': 'An error occurred during the search'}), 500


@app.route('/api/games/populate', methods=['POST'])
def api_populate_games():
    """Import the Android and iOS top-100 catalogs"""
    if not ensure_db_available():
        return jsonify({
            'success': False,
            'error': 'Failed to populate database',
            'details': 'Database not available',
        }), 503
    try:
        db = database.get_session()
        try:
            with build_reconciler(GameRepository(db)) as reconciler:
                summary = reconciler.run()
        finally:
            db.close()
    except CatalogFetchError as e:
        server_logger.error(f"Error populating the database: {e}")
        return jsonify({
            'success': False,
            'error': 'Failed to populate database',
            'details': str(e),
        }), 500
    except Exception as e:
        server_logger.exception(f"Error populating the database: {e}")
        return jsonify({
            'success': False,
            'error': 'Failed to populate database',
            'details': str(e),
        }), 500

    return jsonify({
        'success': True,
        'message': summary.message,
        'count': summary.processed,
    })


# ---------------------------------------------------------------------------
# API Documentation — OpenAPI 3.0 + Swagger UI
# ---------------------------------------------------------------------------

@app.route('/api/openapi.json')
def api_openapi_spec():
    """Serve the OpenAPI 3.0 specification as JSON."""
    try:
        from openapi_spec import build_spec
        server_url = request.url_root.rstrip('/')
        spec = build_spec(server_url=server_url)
        return jsonify(spec)
    except Exception as e:
        server_logger.error(f"Error building OpenAPI spec: {e}")
        return jsonify({'error': 'Could not generate spec'}), 500


@app.route('/api/docs')
def api_swagger_ui():
    """Serve an interactive Swagger UI for the GameStore REST API."""
    openapi_url = '/api/openapi.json'
    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>GameStore API Documentation</title>
  <link rel="stylesheet"
        href="https://unpkg.com/swagger-ui-dist@5/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
  <script>
    SwaggerUIBundle({{
      url: "{openapi_url}",
      dom_id: "#swagger-ui",
      presets: [SwaggerUIBundle.presets.apis, SwaggerUIBundle.SwaggerUIStandalonePreset],
      layout: "BaseLayout",
      deepLinking: true,
    }});
  </script>
</body>
</html>"""
    return html, 200, {'Content-Type': 'text/html; charset=utf-8'}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _add_file_logging(level: str) -> None:
    try:
        os.makedirs('logs', exist_ok=True)
        fh = logging.FileHandler('logs/gamestore_server.log')
        fh.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
        fh.setLevel(getattr(logging, level.upper(), logging.INFO))
        gamestore_logger.addHandler(fh)
    except OSError:
        server_logger.warning('Could not create log file handler')


def run_populate() -> int:
    """Run one catalog import from the command line."""
    if not ensure_db_available():
        print(f"{Fore.RED}✗ Database not available: check DATABASE_URL")
        return 1
    db = database.get_session()
    try:
        with build_reconciler(GameRepository(db)) as reconciler:
            summary = reconciler.run()
    except CatalogFetchError as e:
        print(f"{Fore.RED}✗ Failed to populate database: {e}")
        return 1
    finally:
        db.close()
    print(f"{Fore.GREEN}✓ {summary.message}")
    return 0


def main():
    """Main entry point for the server"""
    global config
    parser = argparse.ArgumentParser(description='GameStore Server')
    parser.add_argument('--config', default='config.json', help='Path to config file')
    parser.add_argument('--host', help='Interface to bind (overrides config)')
    parser.add_argument('--port', type=int, help='Port to listen on (overrides config)')
    parser.add_argument('--debug', action='store_true', help='Run Flask in debug mode')
    parser.add_argument('--populate', action='store_true',
                        help='Import the Android and iOS catalogs once and exit')
    args = parser.parse_args()

    try:
        config = gamestore.load_config(args.config)
    except gamestore.ConfigError as e:
        print(f"{Fore.RED}Error: {e}")
        print(f"{Fore.YELLOW}Copy 'config_template.json' to 'config.json' and fix the values.")
        return 1

    gamestore.setup_logging(config.get('log_level', 'INFO'))
    _add_file_logging(config.get('log_level', 'INFO'))

    if args.populate:
        return run_populate()

    if not ensure_db_available():
        server_logger.warning('Database not available yet; will retry on first request')

    host = args.host or config['host']
    port = args.port or config['port']

    print("\n" + "=" * 60)
    print(f"{Style.BRIGHT}🎮 GameStore Server is starting...")
    print("=" * 60)
    print(f"\n  API:  http://{host}:{port}/api/games")
    print(f"  Docs: http://{host}:{port}/api/docs")
    print("\nPress Ctrl+C to stop the server")
    print("=" * 60 + "\n")

    try:
        app.run(host=host, port=port, debug=args.debug)
    except KeyboardInterrupt:
        print(f"\n{Fore.YELLOW}🛑 GameStore Server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
