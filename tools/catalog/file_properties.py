"""File properties namespace: custom properties on files and their templates."""

from typing import Any

from models import Endpoint
from tools.schema import CURSOR, PATH, TEMPLATE_ID, objects, string, strings
from tools.catalog.common import normalized
from validation import tagged

_PROPERTY_GROUPS = objects(
    "Property groups: each has template_id and fields [{name, value}].",
    {
        "template_id": TEMPLATE_ID,
        "fields": objects("Field values.", {"name": string("Field name."), "value": string("Field value.")}),
    },
    ["template_id", "fields"],
)

_TEMPLATE_FIELDS = objects(
    "Template fields: each has name, description and type (string).",
    {
        "name": string("Field name."),
        "description": string("Field description."),
        "type": string("Field type.", enum=["string"]),
    },
    ["name", "description"],
)


def _template_fields(fields: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{**field, "type": tagged(field.get("type", "string"))} for field in fields]


def _add_template(args: dict[str, Any]) -> dict[str, Any]:
    return {**args, "fields": _template_fields(args["fields"])}


def _update_template(args: dict[str, Any]) -> dict[str, Any]:
    body = dict(args)
    if "add_fields" in body:
        body["add_fields"] = _template_fields(body["add_fields"])
    return body


def _search(args: dict[str, Any]) -> dict[str, Any]:
    queries = []
    for query in args["queries"]:
        queries.append({
            "query": query["query"],
            "mode": query.get("mode") or tagged("field_name", query["field_name"]),
            "logical_operator": tagged(query.get("logical_operator", "or_operator")),
        })
    return {"queries": queries, "template_filter": tagged(args["template_filter"])}


ENDPOINTS: list[Endpoint] = [
    Endpoint(
        name="add_file_properties",
        route="file_properties/properties/add",
        description="Add custom property groups to a file.",
        params={"path": PATH, "property_groups": _PROPERTY_GROUPS},
        required=("path", "property_groups"),
        body=normalized("path"),
    ),
    Endpoint(
        name="overwrite_properties",
        route="file_properties/properties/overwrite",
        description="Overwrite custom property groups on a file.",
        params={"path": PATH, "property_groups": _PROPERTY_GROUPS},
        required=("path", "property_groups"),
        body=normalized("path"),
    ),
    Endpoint(
        name="remove_properties",
        route="file_properties/properties/remove",
        description="Remove custom property groups from a file by template id.",
        params={"path": PATH, "property_template_ids": strings("Template ids to remove.")},
        required=("path", "property_template_ids"),
        body=normalized("path"),
    ),
    Endpoint(
        name="search_property_templates",
        route="file_properties/properties/search",
        description="Search files by custom property values.",
        params={
            "queries": objects(
                "Queries: each matches query text against a field_name.",
                {
                    "query": string("Value to search for."),
                    "field_name": string("Property field to search."),
                    "logical_operator": string("How to combine queries.", enum=["or_operator"]),
                },
                ["query", "field_name"],
            ),
            "template_filter": string("Which templates to search.", enum=["filter_none", "filter_some"]),
        },
        required=("queries",),
        defaults={"template_filter": "filter_none"},
        body=_search,
    ),
    Endpoint(
        name="properties_search_continue",
        route="file_properties/properties/search/continue",
        description="Get the next page of property search results.",
        params={"cursor": CURSOR},
        required=("cursor",),
    ),
    Endpoint(
        name="add_template_for_team",
        route="file_properties/templates/add_for_team",
        description="Add a property template for the team.",
        params={
            "name": string("Template name."),
            "description": string("Template description."),
            "fields": _TEMPLATE_FIELDS,
        },
        required=("name", "description", "fields"),
        body=_add_template,
    ),
    Endpoint(
        name="get_template_for_team",
        route="file_properties/templates/get_for_team",
        description="Get a team property template.",
        params={"template_id": TEMPLATE_ID},
        required=("template_id",),
    ),
    Endpoint(
        name="get_template_schema",
        route="file_properties/templates/get_for_user",
        description="Get a user property template.",
        params={"template_id": TEMPLATE_ID},
        required=("template_id",),
    ),
    Endpoint(
        name="list_templates_for_team",
        route="file_properties/templates/list_for_team",
        description="List the team's property template ids.",
    ),
    Endpoint(
        name="list_templates_for_user",
        route="file_properties/templates/list_for_user",
        description="List the user's property template ids.",
        select_user=True,
        path_root=True,
    ),
    Endpoint(
        name="remove_template",
        route="file_properties/templates/remove_for_team",
        description="Permanently remove a team property template.",
        params={"template_id": TEMPLATE_ID},
        required=("template_id",),
    ),
    Endpoint(
        name="update_template_for_team",
        route="file_properties/templates/update_for_team",
        description="Update a team property template's name, description or fields.",
        params={
            "template_id": TEMPLATE_ID,
            "name": string("New name."),
            "description": string("New description."),
            "add_fields": _TEMPLATE_FIELDS,
        },
        required=("template_id",),
        body=_update_template,
    ),
    Endpoint(
        name="update_template_for_user",
        route="file_properties/templates/update_for_user",
        description="Update a user property template's name, description or fields.",
        params={
            "template_id": TEMPLATE_ID,
            "name": string("New name."),
            "description": string("New description."),
            "add_fields": _TEMPLATE_FIELDS,
        },
        required=("template_id",),
        body=_update_template,
    ),
]
