"""
Hit & Blow - Two-player number deduction battle engine

A deterministic, rules-driven engine for Hit and Blow matches with an
optional card battle mode. It provides:
- Hit/Blow judging
- A phase state machine for secrets, drafts, guesses and card use
- Damage resolution with single-use modifiers
- An ordered replay event list per turn for presentation layers
"""

__version__ = "0.1.0"
