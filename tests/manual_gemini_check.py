"""Manual script to verify a Gemini API key works."""

from __future__ import annotations

import os

import requests
from config.settings import API_KEY_ENV, load_config

config = load_config()  # reads .env into os.environ

BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
API_KEY = config.env_api_key
MODEL = config.model_for("gemini")

if not API_KEY:
    print(f"[error] {API_KEY_ENV} not set; check .env or environment variables.")
    raise SystemExit(1)

headers = {"x-goog-api-key": API_KEY, "Content-Type": "application/json"}

try:
    resp = requests.get(f"{BASE_URL}/models", headers=headers, timeout=30)
    print("Status:", resp.status_code)
    if resp.ok:
        data = resp.json()
        print("Models count:", len(data.get("models", [])))
        for item in data.get("models", [])[:5]:
            print("-", item.get("name"))
    else:
        print(resp.text[:500])

    payload = {
        "systemInstruction": {"parts": [{"text": "You write short anime image prompts."}]},
        "contents": [{"role": "user", "parts": [{"text": "anime knight defending a gate"}]}],
        "generationConfig": {"maxOutputTokens": 120},
    }
    chat = requests.post(
        f"{BASE_URL}/models/{MODEL}:generateContent",
        headers=headers,
        json=payload,
        timeout=30,
    )
    print("Generate status:", chat.status_code)
    if chat.ok:
        data = chat.json()
        candidate = data.get("candidates", [{}])[0]
        parts = candidate.get("content", {}).get("parts", [])
        print("Generation:", "".join(part.get("text", "") for part in parts))
    else:
        print(chat.text[:500])
except Exception as exc:  # noqa: BLE001
    print("[error]", exc)
    raise
