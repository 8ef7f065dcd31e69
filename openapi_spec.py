"""
openapi_spec.py  —  GameStore OpenAPI 3.0 specification builder.

Returns a Python dict (compatible with ``json.dumps``) that describes every
REST endpoint exposed by ``gamestore_server.py``.

Usage (from gamestore_server.py)::

    from openapi_spec import build_spec
    spec = build_spec(server_url="http://localhost:3000")
"""

from typing import Any, Dict


def _ref(name: str) -> Dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def _resp(description: str, schema: Dict = None) -> Dict:
    content: Dict[str, Any] = {}
    if schema:
        content = {"application/json": {"schema": schema}}
    r: Dict[str, Any] = {"description": description}
    if content:
        r["content"] = content
    return r


def _json_resp(description: str, schema: Dict = None) -> Dict:
    if schema is None:
        schema = {"type": "object"}
    return _resp(description, schema)


def _game_id_param() -> Dict:
    return {"name": "id", "in": "path", "required": True,
            "schema": {"type": "integer"}}


def _game_body(description: str) -> Dict:
    return {
        "required": False,
        "description": description,
        "content": {"application/json": {"schema": _ref("GameInput")}},
    }


def build_spec(server_url: str = "/") -> Dict[str, Any]:
    """Return the full OpenAPI 3.0 specification dict."""

    game_properties = {
        "publisherId": {"type": "string", "nullable": True},
        "name":        {"type": "string", "example": "Subway Surfers"},
        "platform":    {"type": "string", "example": "android"},
        "storeId":     {"type": "string", "nullable": True},
        "bundleId":    {"type": "string", "nullable": True,
                        "example": "com.kiloo.subwaysurf"},
        "appVersion":  {"type": "string", "example": "1.0"},
        "isPublished": {"type": "boolean"},
    }

    spec: Dict[str, Any] = {
        "openapi": "3.0.3",
        "info": {
            "title": "GameStore — Game Catalog API",
            "version": "1.0.0",
            "description": (
                "REST API for managing game records per platform store, plus a "
                "bulk import that pulls the Android and iOS top-100 catalogs and "
                "upserts them by (name, platform)."
            ),
            "license": {"name": "MIT"},
        },
        "servers": [{"url": server_url, "description": "GameStore server"}],
        "tags": [
            {"name": "games",  "description": "Game CRUD and search"},
            {"name": "import", "description": "Bulk catalog import"},
            {"name": "docs",   "description": "API documentation"},
        ],
        "components": {
            "schemas": {
                "Error": {
                    "type": "object",
                    "properties": {"error": {"type": "string"}},
                    "required": ["error"],
                },
                "GameInput": {
                    "type": "object",
                    "properties": game_properties,
                },
                "Game": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer", "example": 1},
                        **game_properties,
                        "createdAt": {"type": "string", "format": "date-time"},
                        "updatedAt": {"type": "string", "format": "date-time"},
                    },
                },
                "PopulateResult": {
                    "type": "object",
                    "properties": {
                        "success": {"type": "boolean", "example": True},
                        "message": {"type": "string",
                                    "example": "Successfully processed 200 out of 200 games"},
                        "count":   {"type": "integer", "example": 200},
                    },
                },
                "PopulateError": {
                    "type": "object",
                    "properties": {
                        "success": {"type": "boolean", "example": False},
                        "error":   {"type": "string", "example": "Failed to populate database"},
                        "details": {"type": "string"},
                    },
                },
            },
        },
        "paths": _build_paths(),
    }
    return spec


def _build_paths() -> Dict[str, Any]:
    paths: Dict[str, Any] = {}
    game_list = {"type": "array", "items": _ref("Game")}

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------
    paths["/api/games"] = {
        "get": {
            "tags": ["games"],
            "summary": "List all games",
            "responses": {
                "200": _json_resp("All stored games", game_list),
                "500": _json_resp("Storage error", _ref("Error")),
            },
        },
        "post": {
            "tags": ["games"],
            "summary": "Create a game",
            "requestBody": _game_body("Fields of the new game; unknown keys are ignored."),
            "responses": {
                "200": _json_resp("Created game", _ref("Game")),
                "400": _json_resp("Could not create the game", _ref("Error")),
            },
        },
    }
    paths["/api/games/{id}"] = {
        "put": {
            "tags": ["games"],
            "summary": "Replace a game",
            "description": "Full replace: fields missing from the body are cleared.",
            "parameters": [_game_id_param()],
            "requestBody": _game_body("New values for every game field."),
            "responses": {
                "200": _json_resp("Updated game", _ref("Game")),
                "400": _json_resp("Could not update the game", _ref("Error")),
                "404": _json_resp("No such game", _ref("Error")),
            },
        },
        "delete": {
            "tags": ["games"],
            "summary": "Delete a game",
            "parameters": [_game_id_param()],
            "responses": {
                "200": _json_resp("Deleted game id",
                                  {"type": "object",
                                   "properties": {"id": {"type": "integer"}}}),
                "400": _json_resp("Could not delete the game", _ref("Error")),
                "404": _json_resp("No such game", _ref("Error")),
            },
        },
    }
    paths["/api/games/search"] = {
        "post": {
            "tags": ["games"],
            "summary": "Search games",
            "description": ("Blank filters are ignored. `name` matches as a substring, "
                            "`platform` exactly. Results are ordered by name."),
            "requestBody": {
                "required": False,
                "content": {"application/json": {"schema": {
                    "type": "object",
                    "properties": {
                        "name":     {"type": "string"},
                        "platform": {"type": "string"},
                    },
                }}},
            },
            "responses": {
                "200": _json_resp("Matching games", game_list),
                "500": _json_resp("Search failed", _ref("Error")),
            },
        }
    }

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------
    paths["/api/games/populate"] = {
        "post": {
            "tags": ["import"],
            "summary": "Import the Android and iOS top-100 catalogs",
            "description": ("Fetches both catalogs concurrently, then creates or updates "
                            "one game per (name, platform). Games that fail to save are "
                            "skipped and not counted."),
            "responses": {
                "200": _json_resp("Import finished", _ref("PopulateResult")),
                "500": _json_resp("A catalog could not be fetched", _ref("PopulateError")),
            },
        }
    }

    # ------------------------------------------------------------------
    # API docs (self-referential)
    # ------------------------------------------------------------------
    paths["/api/openapi.json"] = {
        "get": {
            "tags": ["docs"],
            "summary": "OpenAPI 3.0 specification (JSON)",
            "responses": {
                "200": _json_resp("OpenAPI spec", {"type": "object"}),
            },
        }
    }
    paths["/api/docs"] = {
        "get": {
            "tags": ["docs"],
            "summary": "Swagger UI — interactive API documentation",
            "responses": {
                "200": {"description": "HTML page",
                        "content": {"text/html": {"schema": {"type": "string"}}}},
            },
        }
    }

    return paths
