"""
Writes the OpenAPI document of the faucet API, as served in production.
Usage:
```shell
PYTHONPATH=. python scripts/export_openapi.py
```
"""

import json

import settings

OUTPUT_PATH = "scripts/openapi.json"


def main():
    # Server list in the document depends on the environment
    settings.ENVIRONMENT = "production"

    import app

    docs = app.app.openapi()
    with open(OUTPUT_PATH, "w", encoding="utf-8") as f:
        f.write(json.dumps(docs, indent=2))
    print(f"Wrote {len(docs['paths'])} paths to {OUTPUT_PATH}")


if __name__ == "__main__":
    main()
