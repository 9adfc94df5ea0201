from typing import Union, Optional

from tortoise import Model


def resolve_id(target: Union[Model, int]):
    if isinstance(target, Model):
        return target.id
    elif isinstance(target, int):
        return target
    else:
        raise TypeError(f"Target {target} is neither a Model or an int.")


def fetched(related) -> Optional[Model]:
    """
    Returns the related model if it has been fetched, or None.

    An unfetched foreign key resolves to a query rather than a model,
    so serializers use this to only include what has been loaded.
    """
    return related if isinstance(related, Model) else None
