from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# money travels as Decimal internally and as a JSON number on the wire
Money = Annotated[
    Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")
]
