from typing import Optional, Type, TypeVar

T = TypeVar("T")


def find_subclass(class_name: str, cls: Type[T]) -> Optional[Type[T]]:
  """Find the class called `class_name` among `cls` and all of its (indirect) subclasses.

  Only classes that have been imported can be found.
  """

  pending = [cls]
  while pending:
    candidate = pending.pop()
    if candidate.__name__ == class_name:
      return candidate
    pending.extend(candidate.__subclasses__())
  return None
