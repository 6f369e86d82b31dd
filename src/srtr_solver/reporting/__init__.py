"""
Reporting module for SRTR Solver.

Formats progress output of tuning runs:
- Framed SMT2 problem dump
- Parameter adjustment table (baseline, eps, tuned value, |eps| bounds)
"""

from srtr_solver.reporting.tuning_reporter import adjustment_table, section

__all__ = ['adjustment_table', 'section']
