"""
DIMACS CNF utilities.

Used to export the coloring reduction so it can be fed to external solvers,
and to read such files back.
"""

from typing import Any, TextIO


def parse_dimacs(source: str | TextIO) -> tuple[list[list[int]], dict[str, Any]]:
    """
    Parse a CNF formula in DIMACS format.

    Args:
        source: DIMACS content as a string or file-like object

    Returns:
        Tuple of (formula, metadata)
        - formula: List of clauses (each clause is a list of literals)
        - metadata: Dictionary with the comments and the declared sizes

    Raises:
        ValueError: If the format is invalid
    """
    if isinstance(source, str):
        lines = source.strip().split("\n")
    else:
        lines = source.readlines()

    formula = []
    metadata = {"comments": [], "num_variables": 0, "num_clauses": 0}

    found_problem_line = False
    current_clause = []

    for line in lines:
        line = line.strip()

        if not line:
            continue

        if line.startswith("c"):
            metadata["comments"].append(line[1:].strip())
            continue

        if line.startswith("p"):
            if found_problem_line:
                raise ValueError("Multiple problem lines in CNF file")

            parts = line.split()
            if len(parts) < 4 or parts[1] != "cnf":
                raise ValueError(f"Invalid problem line: {line}")

            try:
                metadata["num_variables"] = int(parts[2])
                metadata["num_clauses"] = int(parts[3])
            except ValueError:
                raise ValueError(f"Invalid numbers in problem line: {line}")

            found_problem_line = True
            continue

        # A terminating 0 closes the clause, so "0" on its own is the empty clause
        for value in (int(x) for x in line.split()):
            if value == 0:
                formula.append(current_clause)
                current_clause = []
            else:
                current_clause.append(value)

    if current_clause:
        formula.append(current_clause)

    if not found_problem_line:
        raise ValueError("No problem line found in CNF file")

    if len(formula) != metadata["num_clauses"]:
        raise ValueError(
            f"Expected {metadata['num_clauses']} clauses, but found {len(formula)}"
        )

    return formula, metadata


def write_dimacs(
    formula: list[list[int]],
    num_variables: int | None = None,
    comments: list[str] | None = None,
) -> str:
    """
    Convert a formula to DIMACS format.

    Args:
        formula: List of clauses (each clause is a list of literals)
        num_variables: Number of variables (computed if not provided)
        comments: List of comment lines to include

    Returns:
        DIMACS format string representation
    """
    if num_variables is None:
        num_variables = max(
            (abs(lit) for clause in formula for lit in clause), default=0
        )

    lines = [f"c {comment}" for comment in comments or []]
    lines.append(f"p cnf {num_variables} {len(formula)}")
    for clause in formula:
        lines.append(" ".join([*map(str, clause), "0"]))

    return "\n".join(lines) + "\n"


def save_cnf_file(
    file_path: str,
    formula: list[list[int]],
    num_variables: int | None = None,
    comments: list[str] | None = None,
) -> None:
    """
    Save a CNF formula to a DIMACS file.

    Args:
        file_path: Path to save the CNF file
        formula: List of clauses (each clause is a list of literals)
        num_variables: Number of variables (computed if not provided)
        comments: List of comment lines to include
    """
    with open(file_path, "w") as f:
        f.write(write_dimacs(formula, num_variables, comments))


def check_solution(formula: list[list[int]], assignment: dict[int, bool]) -> bool:
    """
    Check if a complete assignment satisfies a CNF formula.

    Args:
        formula: List of clauses, each clause being a list of literals
        assignment: Dictionary mapping DIMACS variable indices to Boolean values

    Returns:
        True if every clause has a literal made true by the assignment
    """
    return all(
        any(assignment.get(abs(lit)) == (lit > 0) for lit in clause)
        for clause in formula
    )
