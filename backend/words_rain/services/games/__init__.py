"""Game domain services: the falling-words engine.

This package contains the pure game logic run by the local client: word
spawning and falling, keystroke targeting, scoring, the post-solve
freeze sequence and completion detection. Nothing here knows about HTTP,
pygame or a particular speech engine; those are injected at the edges.
"""
