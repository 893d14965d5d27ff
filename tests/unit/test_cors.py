from __future__ import annotations

from dataclasses import replace

from app.core.cors import cors_headers


def test_wildcard_answers_every_origin(settings) -> None:
  headers = cors_headers(settings, "https://anywhere.example")

  assert headers == {"Access-Control-Allow-Origin": "*", "Access-Control-Allow-Methods": "GET, POST, OPTIONS", "Access-Control-Allow-Headers": "Content-Type"}


def test_listed_origin_is_echoed(settings) -> None:
  restricted = replace(settings, allowed_origins=("https://planner.example",))

  headers = cors_headers(restricted, "https://planner.example")

  assert headers["Access-Control-Allow-Origin"] == "https://planner.example"
  assert headers["Vary"] == "Origin"


def test_unlisted_origin_gets_no_allow_origin(settings) -> None:
  restricted = replace(settings, allowed_origins=("https://planner.example",))

  assert "Access-Control-Allow-Origin" not in cors_headers(restricted, "https://elsewhere.example")
  assert "Access-Control-Allow-Origin" not in cors_headers(restricted)
