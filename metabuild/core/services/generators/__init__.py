"""Generators — produce build-system files from the target model."""

from metabuild.core.services.generators.cmake_lists import (
    generate_cmake_lists,
    write_cmake_lists,
)

__all__ = ["generate_cmake_lists", "write_cmake_lists"]
