"""Pipeline Module

Stage orchestration, dataset assembly and the output contract.
"""
