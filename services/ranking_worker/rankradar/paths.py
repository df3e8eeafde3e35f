from __future__ import annotations

AHREFS_FILE = "ahrefs_top_tw.json"
TRANCO_FILE = "tranco_list_tw.json"
CLOUDFLARE_FILE = "cloudflare_radar_tw.json"
DUPLICATES_FILE = "duplicates-check.json"
