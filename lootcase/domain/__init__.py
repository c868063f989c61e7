"""Domain layer (pure logic).

- Keep reward, odds and leveling rules here.
- Avoid I/O: no DB sessions, no HTTP/FastAPI, no Redis.
- Random sources are passed in so draws can be seeded in tests.
"""
