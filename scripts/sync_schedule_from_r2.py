#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
sync_schedule_from_r2.py

Downloads the timetable workbook from Cloudflare R2 (S3), splits it into
weeks and posts them to /schedule/import.

Required ENV (R2):
  R2_ENDPOINT=https://<accountid>.r2.cloudflarestorage.com
  R2_BUCKET=...
  R2_ACCESS_KEY_ID=...
  R2_SECRET_ACCESS_KEY=...

Required ENV (API):
  API_BASE_URL=http://127.0.0.1:8000

Optional ENV:
  R2_KEY=schedule/current.xlsx
  OUT_PATH=tmp/schedule_current.xlsx
  SHEET_NAME=                    (first sheet when empty)
  LOGIN_USERNAME=admin
  ACCESS_TOKEN=...               (skips the login when set)
  REQUEST_TIMEOUT=120            (seconds)
"""

from __future__ import annotations

import os
import json
from typing import Any, Dict, List, Tuple

import boto3
import requests
from dotenv import load_dotenv

from app.services.schedule_sheet import group_rows_into_weeks, read_schedule_rows


# ----------------------------
# Helpers
# ----------------------------

def die(msg: str, code: int = 1) -> None:
    print(f"[ERROR] {msg}")
    raise SystemExit(code)


def env_required(name: str) -> str:
    v = os.getenv(name)
    if not v:
        die(f"required environment variable is not set: {name}")
    return v


# ----------------------------
# R2
# ----------------------------

def r2_client():
    return boto3.client(
        "s3",
        endpoint_url=env_required("R2_ENDPOINT"),
        aws_access_key_id=env_required("R2_ACCESS_KEY_ID"),
        aws_secret_access_key=env_required("R2_SECRET_ACCESS_KEY"),
        region_name="auto",
    )


def download_from_r2(bucket: str, key: str, out_path: str) -> None:
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    r2_client().download_file(bucket, key, out_path)
    print(f"OK download: {key} -> {out_path}")


# ----------------------------
# API
# ----------------------------

def api_url(api_base_url: str, path: str) -> str:
    return api_base_url.rstrip("/") + path


def api_login_and_get_token(api_base_url: str, username: str, timeout: int) -> str:
    url = api_url(api_base_url, "/auth/login")
    resp = requests.post(url, json={"username": username}, timeout=timeout)
    if resp.status_code != 200:
        die(f"login failed at {url}. Status {resp.status_code}: {resp.text}")

    token = resp.json().get("access_token")
    if not token:
        die("login succeeded but access_token is missing")
    return token


def fetch_existing_week_names(api_base_url: str, timeout: int) -> List[str]:
    resp = requests.get(api_url(api_base_url, "/weeks"), timeout=timeout)
    if resp.status_code != 200:
        die(f"could not list weeks. Status {resp.status_code}: {resp.text}")
    return [w["name"] for w in resp.json()]


def post_schedule_import(
    api_base_url: str,
    token: str,
    weeks: List[Dict[str, Any]],
    timeout: int,
) -> Tuple[int, Any]:
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "accept": "application/json",
    }
    resp = requests.post(
        api_url(api_base_url, "/schedule/import"),
        json={"weeks": weeks},
        headers=headers,
        timeout=timeout,
    )
    try:
        body = resp.json()
    except ValueError:
        body = resp.text
    return resp.status_code, body


def print_report(body: Dict[str, Any]) -> None:
    summary = body.get("summary", {})
    print(
        "Weeks: {totalWeeks} | ok: {successCount} | skipped: {skippedCount} | "
        "errors: {errorCount} | entries: {importedItemsCount}".format(
            **{k: summary.get(k, 0) for k in (
                "totalWeeks", "successCount", "skippedCount", "errorCount", "importedItemsCount",
            )}
        )
    )
    for r in body.get("results", []):
        detail = r.get("reason") or r.get("error") or f"{r.get('itemsImported', 0)} entries"
        print(f"  - {r.get('week')}: {r.get('status')} ({detail})")


# ----------------------------
# Main
# ----------------------------

def main() -> None:
    load_dotenv()

    request_timeout = int(os.getenv("REQUEST_TIMEOUT", "120"))

    bucket = env_required("R2_BUCKET")
    r2_key = os.getenv("R2_KEY") or "schedule/current.xlsx"
    out_path = os.getenv("OUT_PATH") or "tmp/schedule_current.xlsx"
    sheet_name = os.getenv("SHEET_NAME") or None

    api_base_url = env_required("API_BASE_URL")
    login_username = os.getenv("LOGIN_USERNAME") or "admin"

    # 1) download
    download_from_r2(bucket=bucket, key=r2_key, out_path=out_path)

    # 2) read and split into weeks
    rows = read_schedule_rows(out_path, sheet_name=sheet_name)
    if not rows:
        die("no schedule rows found in the workbook. Check the sheet layout.")

    existing_names = fetch_existing_week_names(api_base_url, timeout=request_timeout)
    weeks = group_rows_into_weeks(rows, existing_names=existing_names)
    print(f"{len(rows)} rows in {len(weeks)} week(s)")

    payload = [w.model_dump(mode="json", by_alias=True) for w in weeks]
    print("Sample (first week, first 3 items):")
    print(json.dumps({**payload[0], "items": payload[0]["items"][:3]}, ensure_ascii=False, indent=2))

    # 3) token (ACCESS_TOKEN first, otherwise login)
    token = os.getenv("ACCESS_TOKEN")
    if not token:
        token = api_login_and_get_token(api_base_url, login_username, timeout=request_timeout)
        print("OK login. Token received.")

    # 4) import
    status, body = post_schedule_import(api_base_url, token, payload, timeout=request_timeout)
    print("API status:", status)

    if status != 200 or not isinstance(body, dict):
        print(json.dumps(body, ensure_ascii=False, indent=2) if isinstance(body, (dict, list)) else body)
        die("schedule import failed", 2)

    print_report(body)
    print("Schedule import finished.")


if __name__ == "__main__":
    main()
