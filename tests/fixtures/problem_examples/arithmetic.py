"""Arithmetic fixtures (E14xx)."""

import math


def e1402_bad_divide_by_zero(total):
    return total / 0


def e1402_bad_floor_divide_augmented(total):
    total //= 0
    return total


def e1402_good_divide(total, count):
    return total / count if count else 0


def e1403_bad_modulo_zero(value):
    return value % 0


def e1403_good_string_format():
    return "%d items" % 0


def e1410_bad_float_equality(ratio):
    return ratio == 0.1


def e1410_bad_float_conversion(text, expected):
    return float(text) != expected


def e1410_good_isclose(ratio):
    return math.isclose(ratio, 0.1)


def e1410_good_integer_equality(count):
    return count == 1
