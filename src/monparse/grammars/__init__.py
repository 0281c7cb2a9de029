"""
Complete grammars built with monparse.

- `monparse.grammars.arith`: an integer calculator.
- `monparse.grammars.lam`: lambda calculus terms with `let`.
"""
