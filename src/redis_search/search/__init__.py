"""
Indexing and query-combination engine.

- analyzers / phonetic / normalizer: free text -> stems -> phonetic classes
- keys: key naming scheme shared by writer, remover and planner
- commands: store commands as plain values
- writer / remover: document index maintenance
- planner: structured query -> atomic set-algebra batch
"""
