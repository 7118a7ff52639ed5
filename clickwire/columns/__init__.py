"""Typed columns that make up data blocks, and a factory building them from type names."""