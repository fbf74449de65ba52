import os
from setuptools import find_packages, setup

this = os.path.dirname(os.path.realpath(__file__))


def read(name):
    with open(os.path.join(this, name)) as f:
        return f.read()


VERSION = "1.0"


setup(
    name="battery-notify",
    version=VERSION,
    description="Desktop notifications for charger and battery level changes on Linux",
    long_description=read("README.md"),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["battery_notify.tests"]),
    install_requires=read("requirements.txt").splitlines(),
    extras_require={"test": ["pytest"]},
    python_requires=">=3.10",
    include_package_data=True,
    zip_safe=True,
    license="MIT",
    keywords="linux battery upower notification charger daemon",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: End Users/Desktop",
        "Operating System :: POSIX :: Linux",
        "Environment :: Console",
        "Natural Language :: English",
    ],
    entry_points={"console_scripts": ["battery-notify=battery_notify.bin.battery_notify:main"]},
)
