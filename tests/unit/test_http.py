# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import copy
from io import BytesIO

import pytest
from snda_signers import URI, Field, Fields, SNDARequest
from snda_signers.interfaces.http import FieldPosition


def test_field_basics() -> None:
    field = Field(name="x-snda-meta-owner", values=["alice"])
    assert field.name == "x-snda-meta-owner"
    assert field.values == ["alice"]
    assert field.kind is FieldPosition.HEADER
    assert field.as_string() == "alice"


def test_field_as_string_joins_values() -> None:
    field = Field(name="x-snda-meta-tags", values=["a", "b,c"])
    assert field.as_string() == "a, b,c"
    assert field.as_string(" ") == "a b,c"
    assert Field(name="empty").as_string() == ""


def test_field_add_and_set() -> None:
    field = Field(name="x-snda-meta-tags", values=["a"])
    field.add("b")
    assert field.values == ["a", "b"]
    field.set(["c"])
    assert field.values == ["c"]


def test_field_equality() -> None:
    assert Field(name="Range", values=["bytes=0-1"]) == Field(
        name="Range", values=["bytes=0-1"]
    )
    assert Field(name="Range", values=["bytes=0-1"]) != Field(
        name="range", values=["bytes=0-1"]
    )
    assert Field(name="Range", values=["a", "b"]) != Field(
        name="Range", values=["b", "a"]
    )


def test_fields_are_case_insensitive() -> None:
    fields = Fields([Field(name="Content-Type", values=["text/plain"])])
    assert "content-type" in fields
    assert fields["CONTENT-TYPE"].values == ["text/plain"]
    # The original spelling of the name is preserved.
    assert fields["content-type"].name == "Content-Type"
    del fields["content-TYPE"]
    assert "Content-Type" not in fields
    assert len(fields) == 0


def test_fields_get_default() -> None:
    fields = Fields()
    assert fields.get("Range") is None
    default = Field(name="Range")
    assert fields.get("Range", default) is default


def test_fields_reject_duplicate_initial_names() -> None:
    with pytest.raises(ValueError):
        Fields([Field(name="X-SNDA-Date"), Field(name="x-snda-date")])


def test_fields_setitem_requires_matching_name() -> None:
    fields = Fields()
    with pytest.raises(ValueError):
        fields["Date"] = Field(name="Range")


def test_fields_set_field_replaces() -> None:
    fields = Fields([Field(name="date", values=["old"])])
    fields.set_field(Field(name="Date", values=["new"]))
    assert len(fields) == 1
    assert fields["date"] == Field(name="Date", values=["new"])


def test_fields_get_by_type() -> None:
    header = Field(name="x-snda-meta-a", values=["1"])
    trailer = Field(name="x-snda-meta-b", values=["2"], kind=FieldPosition.TRAILER)
    fields = Fields([header, trailer])
    assert fields.get_by_type(FieldPosition.HEADER) == [header]
    assert fields.get_by_type(FieldPosition.TRAILER) == [trailer]


@pytest.mark.parametrize(
    "uri,expected",
    [
        (URI(host="storage.grandcloud.cn"), "https://storage.grandcloud.cn"),
        (
            URI(scheme="http", host="localhost", port=8080, path="/mybucket"),
            "http://localhost:8080/mybucket",
        ),
        (
            URI(host="storage.grandcloud.cn", path="/mybucket", query="acl"),
            "https://storage.grandcloud.cn/mybucket?acl",
        ),
    ],
)
def test_uri_build(uri: URI, expected: str) -> None:
    assert uri.build() == expected


def test_uri_netloc() -> None:
    assert URI(host="localhost").netloc == "localhost"
    assert URI(host="localhost", port=8080).netloc == "localhost:8080"


def test_request_content_type() -> None:
    fields = Fields([Field(name="content-type", values=["image/png", "text/plain"])])
    with_body = SNDARequest(
        destination=URI(host="localhost"),
        method="PUT",
        body=BytesIO(b"png"),
        fields=fields,
    )
    without_body = SNDARequest(
        destination=URI(host="localhost"), method="PUT", body=None, fields=fields
    )
    assert with_body.content_type == "image/png"
    assert without_body.content_type is None


def test_request_deepcopy_copies_fields_only() -> None:
    body = BytesIO(b"data")
    request = SNDARequest(
        destination=URI(host="localhost", path="/mybucket"),
        method="PUT",
        body=body,
        fields=Fields([Field(name="x-snda-meta-a", values=["1"])]),
    )
    copied = copy.deepcopy(request)
    copied.fields["x-snda-meta-a"].add("2")
    assert request.fields["x-snda-meta-a"].values == ["1"]
    assert copied.body is body
    assert copied.destination == request.destination
    assert copied.method == "PUT"
