from typing import Dict, Literal, TypedDict

ElasticType = Literal[
    "text",
    "date",
    "boolean",
    "keyword",
    "integer",
]


class ElasticField(TypedDict, total=False):
    type: ElasticType
    fields: Dict[str, "ElasticField"]


ElasticMapping = Dict[str, ElasticField]

# Helper constants and functions to create fields without too much boilerplate

KEYWORD: ElasticField = {"type": "keyword"}
DATE: ElasticField = {"type": "date"}
INTEGER: ElasticField = {"type": "integer"}
BOOLEAN: ElasticField = {"type": "boolean"}
TEXT: ElasticField = {"type": "text"}


def text_with_keyword() -> ElasticField:
    """A text field that can also be used for exact matching and sorting via <field>.keyword"""
    return {"type": "text", "fields": {"keyword": {"type": "keyword"}}}
