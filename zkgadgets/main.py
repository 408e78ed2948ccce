"""
zkgadgets - Memory-Load Demo Entry Point

Builds a memory-load circuit, proves one random load, and shows that
tampering with a public input breaks satisfiability.

Run with:
    python -m zkgadgets.main [depth] [-v]
"""

import logging
import random
import sys
import time

from zkgadgets.config import CircuitConfig
from zkgadgets.gadgets import (
    DigestVariable,
    MemoryLoadGadget,
    VariableArray,
    address_from_path,
    random_authentication_path,
)
from zkgadgets.common.bits import random_bits
from zkgadgets.relations import Protoboard


def print_banner():
    """Print the demo banner."""
    print()
    print("╔" + "═" * 68 + "╗")
    print("║" + " " * 20 + "MEMORY-LOAD GADGET DEMO" + " " * 25 + "║")
    print("╚" + "═" * 68 + "╝")
    print()


def run_memory_load(config: CircuitConfig, seed: int = 42) -> bool:
    """
    Build, constrain and witness one memory-load circuit.

    Address bits, leaf and root are allocated first and declared as the
    primary input, the way a verifier would see them.

    Returns:
        Whether the honest witness satisfies the circuit
    """
    rng = random.Random(seed)
    crh = config.make_crh()
    digest_len = config.digest_len
    depth = config.tree_depth

    pb = Protoboard(config.field)
    address_bits = VariableArray.allocate(pb, depth, "address")
    leaf = DigestVariable(pb, digest_len, "leaf")
    root = DigestVariable(pb, digest_len, "root")
    pb.set_input_sizes(depth + 2 * digest_len)

    load = MemoryLoadGadget(pb, depth, address_bits, leaf, root, crh, "load")

    start = time.perf_counter()
    load.generate_r1cs_constraints()
    constraint_time = time.perf_counter() - start

    leaf_bits = random_bits(digest_len, rng)
    path, root_bits = random_authentication_path(crh, leaf_bits, depth, rng)
    address = address_from_path(path)

    start = time.perf_counter()
    load.generate_r1cs_witness(leaf_bits, root_bits, path)
    witness_time = time.perf_counter() - start

    root.generate_r1cs_witness(root_bits)
    satisfied = pb.is_satisfied()

    print(config.summary())
    print()
    print(f"{'Metric':<28} {'Value':>16}")
    print("-" * 46)
    print(f"{'Loaded address':<28} {address:>16}")
    print(f"{'Variables':<28} {pb.num_variables():>16,}")
    print(f"{'Primary inputs':<28} {pb.num_inputs():>16,}")
    print(f"{'Constraints':<28} {pb.num_constraints():>16,}")
    print(f"{'Expected constraints':<28} {MemoryLoadGadget.expected_constraints(depth, crh):>16,}")
    print(f"{'Constraint generation':<28} {constraint_time * 1000:>14.1f}ms")
    print(f"{'Witness generation':<28} {witness_time * 1000:>14.1f}ms")
    print(f"{'Satisfied':<28} {str(satisfied):>16}")

    # Tamper with the public address: the selector now pins the leaf to the wrong side
    flipped = address_bits[0]
    pb.set_val(flipped, 1 - pb.val(flipped).value)
    print(f"{'Satisfied (address flipped)':<28} {str(pb.is_satisfied()):>16}")

    return satisfied


def main():
    """Main entry point."""
    args = sys.argv[1:]
    if "-v" in args:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
        args.remove("-v")
    depth = int(args[0]) if args else 16

    print_banner()
    config = CircuitConfig(name=f"depth-{depth}", tree_depth=depth)
    satisfied = run_memory_load(config)
    print("\n✓ Demo complete!" if satisfied else "\n✗ Honest witness did not satisfy the circuit")
    return 0 if satisfied else 1


if __name__ == "__main__":
    sys.exit(main())
