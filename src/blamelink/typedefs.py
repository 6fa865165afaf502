from typing import TypeAlias

Author: TypeAlias = str
Email: TypeAlias = str
FileStr: TypeAlias = str

OID: TypeAlias = str  # Object ID = long commit SHA, 40 chars
SHA: TypeAlias = str  # short commit SHA, often 7 chars
Rev: TypeAlias = OID | SHA  # long or short commit SHA, or a ref name

Html: TypeAlias = str
