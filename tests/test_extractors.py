from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
import yaml

from inkwell.errors import MalformedContentError
from inkwell.extractors import (
    build_frontmatter,
    extract_fields,
    parse_frontmatter,
    parse_timestamp,
    split_frontmatter,
)
from inkwell.utils import ZERO_TIME


def test_split_frontmatter_three_segments():
    block, body = split_frontmatter("---\nTitle: Hi\n---\n# Body\n")
    assert block == "\nTitle: Hi\n"
    assert body == "\n# Body\n"


@pytest.mark.parametrize(
    "text",
    [
        "no separators at all",
        "---\nTitle: only one separator\n",
        "---\nTitle: Hi\n---\nbody\n---\nmore",
        "---\n---\n---\n---\n",
    ],
)
def test_split_frontmatter_rejects_wrong_separator_count(text):
    with pytest.raises(MalformedContentError) as excinfo:
        split_frontmatter(text, Path("bad.md"))
    assert excinfo.value.source_path == Path("bad.md")
    assert "bad.md" in str(excinfo.value)


def test_parse_frontmatter_mapping_and_empty():
    assert parse_frontmatter("\nTitle: Hi\nExtra: 1\n") == {"Title": "Hi", "Extra": 1}
    assert parse_frontmatter("\n") == {}


def test_parse_frontmatter_errors():
    with pytest.raises(MalformedContentError, match="mapping"):
        parse_frontmatter("- a\n- b\n")
    with pytest.raises(MalformedContentError, match="invalid front matter") as excinfo:
        parse_frontmatter("Title: [unclosed\n")
    assert isinstance(excinfo.value.original_error, yaml.YAMLError)


def test_parse_timestamp_variants():
    utc = timezone.utc
    assert parse_timestamp(date(2023, 6, 1)) == datetime(2023, 6, 1, tzinfo=utc)
    assert parse_timestamp(datetime(2023, 6, 1, 12, 30)) == datetime(2023, 6, 1, 12, 30, tzinfo=utc)
    plus_two = timezone(timedelta(hours=2))
    converted = parse_timestamp(datetime(2023, 6, 1, 12, 0, tzinfo=plus_two))
    assert converted == datetime(2023, 6, 1, 10, 0, tzinfo=utc)
    assert converted.tzinfo == utc
    assert parse_timestamp("2023-06-01T10:00:00Z") == datetime(2023, 6, 1, 10, tzinfo=utc)
    assert parse_timestamp("2023-06-01") == datetime(2023, 6, 1, tzinfo=utc)
    assert parse_timestamp(None) == ZERO_TIME
    assert parse_timestamp("") == ZERO_TIME

    with pytest.raises(MalformedContentError, match="CreatedAt"):
        parse_timestamp("next tuesday")
    with pytest.raises(MalformedContentError, match="CreatedAt"):
        parse_timestamp(12345)
    with pytest.raises(MalformedContentError, match="out of range"):
        parse_timestamp("0001-01-01T00:00:00+05:00")


def test_extract_fields_from_yaml():
    frontmatter = parse_frontmatter(
        "\n".join(
            [
                "Author: Ada",
                "Title: Engines",
                "Synopsis: On analytical engines",
                "CreatedAt: 2023-06-01T10:00:00Z",
                "Tags: [math, history]",
                "ArticleID: 7",
                "Unknown: ignored",
            ]
        )
    )
    fields = extract_fields(frontmatter)
    assert fields == {
        "author": "Ada",
        "title": "Engines",
        "synopsis": "On analytical engines",
        "created_at": datetime(2023, 6, 1, 10, tzinfo=timezone.utc),
        "tags": ("math", "history"),
        "article_id": 7,
    }


def test_extract_fields_zero_values():
    fields = extract_fields({})
    assert fields == {
        "author": "",
        "title": "",
        "synopsis": "",
        "created_at": ZERO_TIME,
        "tags": (),
        "article_id": 0,
    }


def test_extract_fields_coercions_and_errors():
    fields = extract_fields({"Tags": "solo", "ArticleID": "12", "Title": 2023})
    assert fields["tags"] == ("solo",)
    assert fields["article_id"] == 12
    assert fields["title"] == "2023"

    with pytest.raises(MalformedContentError, match="ArticleID"):
        extract_fields({"ArticleID": "seven"})
    with pytest.raises(MalformedContentError, match="ArticleID"):
        extract_fields({"ArticleID": True})


def test_build_frontmatter_parses_back():
    created = datetime(2024, 3, 2, 8, 15, tzinfo=timezone.utc)
    text = build_frontmatter(
        author="Ada",
        title="Notes: part 1",
        synopsis="Short",
        created_at=created,
        tags=["a", "b"],
        article_id=3,
    )
    assert text.startswith("---\n") and text.endswith("---\n")
    block, body = split_frontmatter(text + "body")
    fields = extract_fields(parse_frontmatter(block))
    assert fields["title"] == "Notes: part 1"
    assert fields["created_at"] == created
    assert fields["tags"] == ("a", "b")
    assert fields["article_id"] == 3
    assert body == "\nbody"
