"""Built-in command categories, grouped by mathematical domain.

A command may appear in more than one category; its primary category is
the first one listed here that contains it. Commands in no category are
reported under ``other``.
"""

from __future__ import annotations

OTHER_CATEGORY = "other"

COMMAND_CATEGORIES: dict[str, tuple[str, ...]] = {
    "trigonometry": (
        "sin", "cos", "tan", "asin", "acos", "atan", "atan2",
        "sinh", "cosh", "tanh", "asinh", "acosh", "atanh",
        "cot", "sec", "csc", "acot", "asec", "acsc",
        "sinc", "sincos",
    ),
    "calculus": (
        "diff", "integrate", "int", "limit", "series", "taylor",
        "derivative", "antiderivative", "gradient", "divergence", "curl",
        "laplacian", "hessian", "jacobian",
    ),
    "algebra": (
        "factor", "expand", "simplify", "solve", "gcd", "lcm",
        "collect", "normal", "ratnormal", "horner", "canonical_form",
        "quo", "rem", "quorem", "proot", "cfactor",
    ),
    "number_theory": (
        "ifactor", "isprime", "nextprime", "prevprime", "euler", "phi",
        "gcd", "lcm", "mod", "irem", "iquo", "isqrt", "icrt",
        "chinese", "jacobi", "legendre", "divisors", "sigma",
    ),
    "linear_algebra": (
        "det", "inv", "trace", "transpose", "tran", "eigenvalues", "eigenvectors",
        "rank", "kernel", "image", "lu", "qr", "svd", "cholesky",
        "rref", "identity", "diag", "jordanblock",
    ),
    "special_functions": (
        "gamma", "beta", "erf", "erfc", "zeta", "Ai", "Bi",
        "Si", "Ci", "Ei", "li", "digamma", "polygamma",
        "BesselJ", "BesselY", "BesselI", "BesselK",
    ),
    "polynomials": (
        "degree", "coeff", "lcoeff", "tcoeff", "coeffs", "roots",
        "pcoeff", "poly2symb", "symb2poly", "resultant", "discriminant",
        "sturm", "sturmab", "realroot",
    ),
    "combinatorics": (
        "binomial", "factorial", "perm", "comb", "fib", "fibonacci",
        "lucas", "stirling1", "stirling2", "bell", "catalan",
        "partition", "compositions",
    ),
    "statistics": (
        "mean", "variance", "stddev", "median", "quartiles",
        "covariance", "correlation", "histogram", "boxwhisker",
        "normald", "binomial_cdf", "poisson",
    ),
    "logic": (
        "and", "or", "not", "xor", "implies", "equiv",
        "true", "false", "assume", "about",
    ),
    "geometry": (
        "point", "line", "circle", "polygon", "distance",
        "midpoint", "perpendicular", "parallel", "tangent",
        "inter", "area", "perimeter",
    ),
}  # fmt: skip


def merge_categories(
    base: dict[str, tuple[str, ...]],
    extra: dict[str, list[str]] | None,
) -> dict[str, tuple[str, ...]]:
    """Merge *extra* categories into *base*, appending new names in order.

    ``other`` cannot be supplied explicitly; it is always derived.
    """
    merged = {name: tuple(cmds) for name, cmds in base.items()}
    for name, cmds in (extra or {}).items():
        if name == OTHER_CATEGORY:
            continue
        existing = list(merged.get(name, ()))
        existing.extend(cmd for cmd in cmds if cmd not in existing)
        merged[name] = tuple(existing)
    return merged


def build_category_lookup(categories: dict[str, tuple[str, ...]]) -> dict[str, str]:
    """Map each command to its primary (first-listed) category."""
    lookup: dict[str, str] = {}
    for category, cmds in categories.items():
        for cmd in cmds:
            lookup.setdefault(cmd, category)
    return lookup
