"""Tools Module

Document loading and parsing:
- document_loader: source registry and BeautifulSoup parsing
- role_info_parser: roleInfo.js object literal parser
- characteristic_rules / entity_extractor: record extraction
"""
