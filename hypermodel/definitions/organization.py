"""Organization model declaration."""

ORGANIZATION = {
    "type": "organization",
    "attributes": ["name", "description", "body"],
    "relationships": {
        "tags": {"type": "many", "entity": "tags"},
    },
}
