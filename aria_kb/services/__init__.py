"""Services Module

Stages that work on extracted records: inheritance resolution, role
categorization and merging of the companion documents.
"""
