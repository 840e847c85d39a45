"""
Parsing layer — raw payloads and sheet CSV text into typed records.

Modules:
  records — field coercion, CSV row splitting, JSON payload parsing,
            sheet-row → canonical record mapping.
"""
