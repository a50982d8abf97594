from dataclasses import dataclass
from typing import List

from muon.schema.types import U16


@dataclass
class Author:
    first: str
    last: str


@dataclass
class Book:
    name: str
    author: Author
    year: U16
    character: List[str]
