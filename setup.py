"""
HTML-Squeeze
------------

Single-pass HTML minifier with rcssmin/rjsmin for embedded CSS and JS, and a Flask extension.
"""

# How to publish:
# python3 setup.py sdist bdist_wheel
# python3 -m twine upload dist/*

import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="HTML-Squeeze",
    version="1.0",
    license="MIT License",
    description="Minify HTML documents and Flask responses!",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    platforms="any",
    python_requires=">=3.8",
    install_requires=[
        "flask",
        "rjsmin",
        "rcssmin",
        "termcolor>=2.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["html-squeeze=html_squeeze.cli:main"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Intended Audience :: Developers",
        "Programming Language :: Python",
        "Topic :: Software Development :: Libraries :: Python Modules"
    ]
)
