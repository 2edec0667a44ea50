"""
Edit distance between entity names.

Levenshtein distance over a full dynamic-programming matrix. Comparison is
case-insensitive, so "Kira" and "KIRA" are identical.
"""


def levenshtein_distance(a: str, b: str) -> int:
    """
    Minimum single-character insertions, deletions and substitutions
    needed to turn ``a`` into ``b`` (case-insensitive).

    Args:
        a: First string
        b: Second string

    Returns:
        Distance (0 = identical, higher = more different)
    """
    a_lower = a.lower()
    b_lower = b.lower()

    if a_lower == b_lower:
        return 0

    rows = len(b_lower) + 1
    cols = len(a_lower) + 1
    matrix = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        matrix[i][0] = i
    for j in range(cols):
        matrix[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            if b_lower[i - 1] == a_lower[j - 1]:
                matrix[i][j] = matrix[i - 1][j - 1]
            else:
                matrix[i][j] = min(
                    matrix[i - 1][j - 1] + 1,  # substitution
                    matrix[i][j - 1] + 1,  # insertion
                    matrix[i - 1][j] + 1,  # deletion
                )

    return matrix[rows - 1][cols - 1]
