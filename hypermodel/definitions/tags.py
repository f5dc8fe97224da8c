"""Tag model declaration — target of organization.tags."""

TAGS = {
    "type": "tags",
    "attributes": ["name"],
    "relationships": {},
}
