# Parallel: single-board kanban task tracker
#
# Components:
#   schema.py    - Data model (Board, Column, Task, TaskStatus, COLUMN_COLORS)
#   migration.py - Legacy status migration and import validation
#   debounce.py  - Debounced single-flight persistence timer
#   storage.py   - Persistence gateway (remote file store + local cache)
#   store.py     - BoardStore state container and mutations
#   server.py    - Flask single-document board file server
#   config.py    - YAML/env configuration
#   cli.py       - Command line entry point
