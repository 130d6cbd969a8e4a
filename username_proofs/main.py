"""Main script for issuing a discount proof from the command line."""

import asyncio
import sys
from typing import Optional

from rich import print

from .domain.models.errors import ProofError
from .infrastructure.dependencies import ServiceContainer


async def main(address: Optional[str] = None) -> int:
    """Issue (or replay) the discount proof for one address."""
    print("[bold]Username Proofs[/bold] - verified account discount signatures")
    print("---------------------------------------------------------------")

    container = ServiceContainer()
    for problem in container.configuration_errors():
        print(f"[red]Configuration error:[/red] {problem}")

    if address is None:
        address = input("\nEnter the claimer address: ").strip()

    try:
        service = await container.get_claim_service()
        result = await service.issue_proof(address)
    except ProofError as e:
        print(f"\n[red]{type(e).__name__} ({e.status_code}):[/red] {e}")
        return 1
    finally:
        await container.shutdown()

    print(f"\nAttestations: {len(result.attestations)}")
    for attestation in result.attestations:
        print(f"  - {attestation.name}: {attestation.value.value}")

    if not result.is_eligible:
        print("\n[yellow]Address is not eligible for the discount.[/yellow]")
        return 0

    print(f"\nLinked addresses: {', '.join(result.linked_addresses or [])}")
    print(f"Signer: {service.signer.address}")
    print(f"\nSigned message:\n{result.signed_message}")
    return 0


def run() -> None:
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None)))


if __name__ == "__main__":
    run()
