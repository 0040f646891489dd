# src/crime_api/api/responses.py

import json

from flask import Response


def json_rows(rows, status=200):
    """Result rows as pretty-printed JSON (4-space indent)."""
    body = json.dumps(rows, indent=4, ensure_ascii=False, default=str)
    return Response(body, status=status, mimetype="application/json")


def plain_text(message, status=200):
    return Response(message, status=status, mimetype="text/plain")
