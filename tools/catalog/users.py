"""Users, account, contacts, auth and check namespaces."""

from typing import Any

from models import Endpoint
from tools.schema import string, strings
from validation import tagged

_FEATURES = ["paper_as_files", "file_locking"]


def _features(args: dict[str, Any]) -> dict[str, Any]:
    return {"features": [tagged(feature) for feature in args["features"]]}


def _profile_photo(args: dict[str, Any]) -> dict[str, Any]:
    return {"photo": tagged("base64_data", args["base64_data"])}


ENDPOINTS: list[Endpoint] = [
    Endpoint(
        name="get_account",
        route="users/get_account",
        description="Get information about a user's account.",
        params={"account_id": string("Account id (dbid:...).")},
        required=("account_id",),
    ),
    Endpoint(
        name="get_account_batch",
        route="users/get_account_batch",
        description="Get information about multiple user accounts (up to 300).",
        params={"account_ids": strings("Account ids (dbid:...).", maxItems=300)},
        required=("account_ids",),
    ),
    Endpoint(
        name="get_current_account",
        route="users/get_current_account",
        description="Get information about the account that owns the access token.",
    ),
    Endpoint(
        name="get_space_usage",
        route="users/get_space_usage",
        description="Get the space usage and allocation of the current account.",
        select_user=True,
        path_root=True,
    ),
    Endpoint(
        name="get_feature_values",
        route="users/features/get_values",
        description="Get the values of account features (e.g. paper_as_files, file_locking).",
        params={"features": strings("Feature names to look up.", minItems=1)},
        defaults={"features": _FEATURES},
        body=_features,
    ),
    Endpoint(
        name="set_profile_photo",
        route="account/set_profile_photo",
        description="Set the current account's profile photo.",
        params={"base64_data": string("Base64-encoded image (JPEG or PNG).")},
        required=("base64_data",),
        body=_profile_photo,
    ),
    Endpoint(
        name="delete_manual_contacts",
        route="contacts/delete_manual_contacts",
        description="Remove all manually added contacts.",
        select_user=True,
        path_root=True,
    ),
    Endpoint(
        name="delete_manual_contacts_batch",
        route="contacts/delete_manual_contacts_batch",
        description="Remove manually added contacts by email address.",
        params={"email_addresses": strings("Email addresses of the contacts to remove.")},
        required=("email_addresses",),
    ),
    Endpoint(
        name="token_from_oauth1",
        route="auth/token/from_oauth1",
        description="Exchange a legacy OAuth 1.0 token for an OAuth 2.0 token (app auth).",
        params={
            "oauth1_token": string("OAuth 1.0 access token."),
            "oauth1_token_secret": string("OAuth 1.0 access token secret."),
        },
        required=("oauth1_token", "oauth1_token_secret"),
    ),
    Endpoint(
        name="revoke_token",
        route="auth/token/revoke",
        description="Revoke the access token used for this call.",
        select_user=True,
        path_root=True,
    ),
    Endpoint(
        name="check_app",
        route="check/app",
        description="Test app authentication: the query is echoed back.",
        params={"query": string("String to echo back.")},
        required=("query",),
    ),
    Endpoint(
        name="check_user",
        route="check/user",
        description="Test user authentication: the query is echoed back.",
        params={"query": string("String to echo back.")},
        required=("query",),
    ),
]
