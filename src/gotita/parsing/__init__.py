"""Block and inline scanning stages of the Gotita pipeline.

The block scanner (gotita.parsing.blocks) consumes every line first;
inline scanning (gotita.parsing.inline) then runs over the collected
text spans while the frozen tree is built.
"""
