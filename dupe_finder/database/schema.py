#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Database schema definitions for the Duplicate Finder.
"""

MAIN_SCHEMA = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS schema_meta (
    name TEXT PRIMARY KEY,
    version TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS scan_records (
    item_id TEXT PRIMARY KEY,
    modified_at REAL NOT NULL
);

CREATE TABLE IF NOT EXISTS result_cache (
    slot INTEGER PRIMARY KEY CHECK (slot = 1),
    scanned_at REAL NOT NULL,
    item_count INTEGER NOT NULL,
    total_savings INTEGER NOT NULL,
    payload TEXT NOT NULL
);
"""
