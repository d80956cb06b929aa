from setuptools import setup, find_packages
import re

VERSIONFILE="asyindex/_version.py"
verstrline = open(VERSIONFILE, "rt").read()
VSRE = r"^__version__ = ['\"]([^'\"]*)['\"]"
mo = re.search(VSRE, verstrline, re.M)
if mo:
	verstr = mo.group(1)
else:
	raise RuntimeError("Unable to find version string in %s." % (VERSIONFILE,))


setup(
	# Application name:
	name="asyindex",

	# Version number (initial):
	version=verstr,

	# Packages
	packages=find_packages(exclude=["tests", "tests.*"]),

	# Include additional files into the package
	include_package_data=True,
	package_data={
		"asyindex": ["public/*.html", "public/*.css", "public/icons/*.svg"],
	},

	zip_safe = False,
	#
	# license="LICENSE.txt",
	description="Asyncio directory listing middleware and server",
	long_description="",

	python_requires='>=3.8',
	classifiers=[
		"Programming Language :: Python :: 3.8",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
	],
	install_requires=[
		'cryptography',
		'h11>=0.14.0',
	],
	extras_require={
		'test': [
			'pytest',
		],
	},
	entry_points={
		'console_scripts': [
			'asyindex-serve = asyindex.examples.indexserver:main',
		],
	}
)
