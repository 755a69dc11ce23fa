import galois

from field import Fr, fr


class Univariate:
    """
    Low-degree univariate polynomial given by its evaluations on {0, 1, ..., k-1}.

    Sumcheck round messages are sent in this form; the verifier evaluates them
    at its challenge with barycentric Lagrange interpolation.
    """

    def __init__(self, evaluations):
        """
        Args:
            evaluations: Fr vector [p(0), p(1), ..., p(k-1)]
        """
        self.evaluations = evaluations
        self.length = len(evaluations)

        # dₖ = ∏_{j≠k} (k - j)
        self.denominators = []
        for k in range(self.length):
            d = 1
            for j in range(self.length):
                if j != k:
                    d *= k - j
            self.denominators.append(fr(d))

    def __getitem__(self, index):
        return self.evaluations[index]

    def evaluate(self, u):
        """
        Evaluate at an arbitrary field element.

        p(u) = ∏ⱼ(u - j) · Σₖ p(k) / (dₖ·(u - k))

        Args:
            u: Evaluation point

        Returns:
            p(u)
        """
        for k in range(self.length):
            if u == fr(k):
                return self.evaluations[k]

        full_numerator = Fr(1)
        for j in range(self.length):
            full_numerator = full_numerator * (u - fr(j))

        result = Fr(0)
        for k in range(self.length):
            result = result + self.evaluations[k] / (self.denominators[k] * (u - fr(k)))
        return result * full_numerator


def fold(table, challenge):
    """
    Bind the lowest variable of a multilinear table to `challenge`.

    p'[i] = p[2i] + u·(p[2i+1] - p[2i])

    Reading the table as coefficients of a univariate, this is the Gemini fold
    (1-u)·A_even + u·A_odd.
    """
    even = table[0::2]
    odd = table[1::2]
    return even + challenge * (odd - even)


def shifted(table):
    """
    Left shift by one row: result[i] = table[i+1], result[n-1] = 0.

    For a table with table[0] = 0 this is division of the univariate by X.
    """
    result = Fr.Zeros(len(table))
    result[:-1] = table[1:]
    return result


def evaluate_mle(table, point):
    """
    Evaluate the multilinear extension of `table` at `point`, lowest variable first.
    """
    for challenge in point:
        table = fold(table, challenge)
    return table[0]


def evaluate(coefficients, x):
    """
    Evaluate a univariate given by ascending coefficients at x.
    """
    return galois.Poly(coefficients, field=Fr, order="asc")(x)


def quotient_by_linear(coefficients, point):
    """
    Coefficients of (p(X) - p(point)) / (X - point), padded to len(coefficients).

    Args:
        coefficients: Ascending coefficients of p
        point: Division point

    Returns:
        Fr vector of the same length as coefficients
    """
    poly = galois.Poly(coefficients, field=Fr, order="asc")
    numerator = poly - galois.Poly([int(poly(point))], field=Fr)
    quotient = numerator // galois.Poly([1, int(-point)], field=Fr)

    result = Fr.Zeros(len(coefficients))
    quotient_coeffs = quotient.coeffs[::-1]
    result[:len(quotient_coeffs)] = quotient_coeffs
    return result
