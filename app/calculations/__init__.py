"""
Financial Calculation Engine

Pure formula modules behind each calculator. Every function takes plain
numbers and returns an immutable result record.
"""

from app.calculations import (
    amortization,
    annuity,
    discount,
    inflation,
    mortgage,
    rate_solver,
    rmd,
    roi,
    salary,
    student_loan,
    tax,
)

__all__ = [
    "amortization",
    "annuity",
    "discount",
    "inflation",
    "mortgage",
    "rate_solver",
    "rmd",
    "roi",
    "salary",
    "student_loan",
    "tax",
]
