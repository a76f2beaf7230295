from Cython.Build import cythonize
from setuptools import Extension, setup

# Hot crypto paths compiled from their pure-Python sources. Optional: without
# a C compiler the .py modules are installed and used as-is.
cythonized_extensions = cythonize(
    [
        Extension(
            "flowattest.hashes.keccak",
            ["src/flowattest/hashes/keccak.py"],
            extra_compile_args=[
                "-O3",
                "-march=native",
                "-Wno-unused-function",
                "-Wno-unused-variable",
            ],
            language="c",
            optional=True,
        ),
        Extension(
            "flowattest.curves.secp256k1",
            ["src/flowattest/curves/secp256k1.py"],
            extra_compile_args=[
                "-O3",
                "-march=native",
                "-Wno-unused-function",
                "-Wno-unused-variable",
            ],
            language="c",
            optional=True,
        ),
    ],
    compiler_directives={
        "language_level": 3,
        "annotation_typing": False,
        "boundscheck": False,
        "wraparound": False,
        "nonecheck": False,
        "initializedcheck": False,
    },
    build_dir="build/cython",
)

if __name__ == "__main__":
    setup(ext_modules=cythonized_extensions)
