"""
SRTR Solver Test Suite.

Unit and integration tests for threshold tuning:
- Registration of tunable parameters
- Compilation of transition events into formulas
- Assembly of the weighted MaxSMT problem
- End-to-end solving and reporting

Test Files:
- test_constants.py: Tests for the settings loader
- test_transitions.py: Tests for the transition-event records
- test_parameter_registry.py: Tests for ParameterRegistry / get_parameters
- test_clause_compiler.py: Tests for ClauseCompiler
- test_constraint_assembler.py: Tests for ConstraintAssembler
- test_z3_backend.py: Tests for Z3Backend
- test_tuning_reporter.py: Tests for report formatting
- test_threshold_optimizer.py: Integration tests for ThresholdOptimizer

Usage:
    # Run all tests
    pytest tests/ -v

    # Run only unit tests (fast)
    pytest tests/ -m unit -v

    # Run only integration tests
    pytest tests/ -m integration -v
"""
