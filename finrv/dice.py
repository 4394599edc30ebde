"""
Convenience constructors for common dice.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, TypeVar

from finrv.physical import PhysicalRandomVariable
from finrv.random_variable import RandomVariable

T = TypeVar("T")


def fair_dice(faces: int, name: Optional[str] = None) -> PhysicalRandomVariable[int]:
    """
    A new fair die with faces numbered 1 to `faces`, independent of all others.
    """
    faces = int(faces)
    if faces <= 0:
        raise ValueError("faces must be positive")
    return PhysicalRandomVariable.from_probability_mass_function(
        {face: 1.0 / faces for face in range(1, faces + 1)}, name=name
    )


def labelled_dice(face_counts: Mapping[T, int], name: Optional[str] = None) -> PhysicalRandomVariable[T]:
    """
    A new fair die with labelled faces.

    `face_counts` maps each label to the number of faces carrying it, so
    {"red": 1, "blue": 4, "yellow": 1} is a six-sided die that shows blue
    with probability 4/6.
    """
    if not face_counts:
        raise ValueError("face_counts cannot be empty")
    for label, count in face_counts.items():
        if int(count) < 0:
            raise ValueError(f"Face count for {label!r} must be non-negative")
    total = sum(int(c) for c in face_counts.values())
    if total <= 0:
        raise ValueError("face_counts must contain at least one face")
    pmf: Dict[T, float] = {label: int(count) / total for label, count in face_counts.items()}
    return PhysicalRandomVariable.from_probability_mass_function(pmf, name=name)


def constant(value: Any, name: Optional[str] = None) -> PhysicalRandomVariable[Any]:
    """
    A random variable that always takes `value`.
    """
    return PhysicalRandomVariable.from_probability_mass_function({value: 1.0}, name=name)


def fair_dice_sum(quantity: int, faces: int, name: Optional[str] = None) -> RandomVariable[int]:
    """
    The sum of `quantity` fair dice with `faces` faces each.

    Dependencies are forgotten after each die is added, so the sample space
    stays a single primitive space no matter how many dice are summed.
    """
    quantity = int(quantity)
    if quantity < 0:
        raise ValueError("quantity must be non-negative")
    acc: RandomVariable[int] = constant(0)
    for _ in range(quantity):
        acc = (acc + fair_dice(faces)).forget_dependencies()
    return acc.set_name(name) if name is not None else acc
