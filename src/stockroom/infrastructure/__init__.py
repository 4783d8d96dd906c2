"""Infrastructure layer — repository implementations behind the domain contract.

Infrastructure may import from domain. It must never import from services.
"""
