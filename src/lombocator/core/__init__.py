"""
Core Package.

Contains the rewrite engine:
- Field Resolver and Shape Classifier
- Tree Mutator and import injection
- Rewrite Coordinator, Safe Writer and Transformation Ledger
- Orchestration Engine
"""
