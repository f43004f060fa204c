"""
Random secrets for the Generate button of the API key and password dialogs.

Each record kind that carries a secret has its own policy: passwords mix all
four character classes, API keys stay alphanumeric and longer so they paste
cleanly into config files and headers.
"""

import random
import secrets
import string
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .models import RecordKind

DEFAULT_LENGTH = 16
MIN_LENGTH = 4
MAX_LENGTH = 128


class SecretPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    length: int = Field(default=DEFAULT_LENGTH, ge=MIN_LENGTH, le=MAX_LENGTH)
    digits: bool = True
    lowercase: bool = True
    uppercase: bool = True
    symbols: bool = True
    extra: str = ""

    @property
    def pools(self) -> list[str]:
        """One pool per selected class; the result holds at least one character from each."""
        selected = [
            (self.digits, string.digits),
            (self.lowercase, string.ascii_lowercase),
            (self.uppercase, string.ascii_uppercase),
            (self.symbols, string.punctuation),
        ]
        return [pool for wanted, pool in selected if wanted]

    @property
    def alphabet(self) -> list[str]:
        return sorted(set("".join(self.pools) + self.extra))

    @model_validator(mode="after")
    def has_source(self) -> "SecretPolicy":
        if not self.pools and not self.extra:
            raise ValueError("At least one character source must be selected")
        return self


POLICIES: dict[RecordKind, SecretPolicy] = {
    RecordKind.PASSWORD: SecretPolicy(),
    RecordKind.API_KEY: SecretPolicy(length=32, symbols=False),
}


def _draw(policy: SecretPolicy) -> str:
    chars = [secrets.choice(pool) for pool in policy.pools]
    alphabet = policy.alphabet
    chars.extend(secrets.choice(alphabet) for _ in range(policy.length - len(chars)))
    random.SystemRandom().shuffle(chars)
    return "".join(chars)


def generate_secret(length: int = DEFAULT_LENGTH,
                    digits: bool = True,
                    lowercase: bool = True,
                    uppercase: bool = True,
                    symbols: bool = True,
                    extra: str = "") -> str:
    """Random secret with at least one character from every selected class.

    Raises ValueError (pydantic's ValidationError) for a length outside
    ``[MIN_LENGTH, MAX_LENGTH]`` or when no character source is selected.
    """
    policy = SecretPolicy(length=length, digits=digits, lowercase=lowercase,
                          uppercase=uppercase, symbols=symbols, extra=extra)
    return _draw(policy)


def generate_for(kind: RecordKind) -> str:
    """Secret shaped for ``kind``'s secret field."""
    if kind not in POLICIES:
        raise ValueError(f"{kind.singular} records carry no secret")
    return _draw(POLICIES[kind])
