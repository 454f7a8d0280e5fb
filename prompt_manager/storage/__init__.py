"""SQLite persistence package.

Architectural role:
    Stores categories, phrases, saved prompts, history, and settings. Every
    repository module takes an explicit `Database` (see `database`) and never
    holds connection state of its own.

Module split:
    - `database`: connection, schema, migrations, transaction helper.
    - `categories`, `phrases`, `prompts`, `history`, `settings`: per-table
      repositories.
    - `records`: content/token helpers shared by prompts and history.
    - `backup`: whole-database export and import.
"""
