#!/usr/bin/env python3
"""
Example usage of 3D gliding-box lacunarity in lacunastack.

Compares a Menger-sponge-like structure, a random field of the same
occupancy and a solid block.
"""

import time
import numpy as np

from lacunastack import BinaryVolume, lacunarity, analyze_volumes, get_sizes


def create_sponge_example(size=81):
    """Create a simple 3D fractal-like structure for testing."""
    array_3d = np.zeros((size, size, size), dtype=np.uint8)

    # Simplified Menger sponge: drop the centre cube and face centres
    def recursive_fill(x, y, z, s, level=0):
        if level > 2 or s < 3:
            return

        third = s // 3
        for i in range(3):
            for j in range(3):
                for k in range(3):
                    if not ((i == 1 and j == 1) or (i == 1 and k == 1) or (j == 1 and k == 1)):
                        new_x = x + i * third
                        new_y = y + j * third
                        new_z = z + k * third

                        if level == 2:  # Fill at the final level
                            array_3d[new_x:new_x+third, new_y:new_y+third, new_z:new_z+third] = 1
                        else:
                            recursive_fill(new_x, new_y, new_z, third, level + 1)

    recursive_fill(0, 0, 0, size)

    return array_3d


def main():
    print("3D Lacunarity Example")
    print("=" * 50)

    print("Creating 3D fractal structure...")
    sponge = BinaryVolume(create_sponge_example())

    print(f"3D Array shape: {sponge.shape}")
    print(f"Occupancy: {sponge.occupancy:.4f}")

    rng = np.random.default_rng(0)
    random_field = (rng.random(sponge.shape) < sponge.occupancy).astype(np.uint8)

    sizes = get_sizes(12, 1, 40)
    print(f"\nBox sizes: {sizes}")

    print("\nLacunarity of the sponge...")
    start_time = time.perf_counter()
    curve = lacunarity(sponge, box_sizes=sizes, verbose=True)
    end_time = time.perf_counter()
    print(f"Time taken: {end_time - start_time} seconds")
    print(curve.to_string(index=False))

    print('\n--------------------------------\n')

    print("Comparing structures...")
    results = analyze_volumes({
        'sponge': sponge,
        'random': random_field,
        'solid': np.ones((27, 27, 27)),
    }, box_sizes=[1, 3, 9, 27])

    print(results.pivot(index='box_size', columns='name', values='lacunarity').to_string())
    print()
    print(results.pivot(index='box_size', columns='name', values='h_r').to_string())

    print("\n3D lacunarity analysis complete!")


if __name__ == "__main__":
    main()
