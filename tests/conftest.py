"""Pytest configuration and fixtures for xsdtree tests."""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from xsdtree.config import Config
from xsdtree.logger import LogLevel
from xsdtree.parser import SchemaParser

TEST_CASES_DIR = Path(__file__).parent / "test_cases"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def simple_xsd_content() -> str:
    """Simple XSD content for testing."""
    return '''<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           targetNamespace="http://example.com/test"
           xmlns:tns="http://example.com/test"
           elementFormDefault="qualified">

    <xs:element name="person" type="tns:PersonType">
        <xs:annotation>
            <xs:documentation>A person element</xs:documentation>
        </xs:annotation>
    </xs:element>

    <xs:complexType name="PersonType">
        <xs:annotation>
            <xs:documentation>Person complex type</xs:documentation>
        </xs:annotation>
        <xs:sequence>
            <xs:element name="name" type="xs:string"/>
            <xs:element name="age" type="xs:int" minOccurs="0"/>
        </xs:sequence>
        <xs:attribute name="id" type="xs:ID" use="required"/>
    </xs:complexType>

    <xs:simpleType name="EmailType">
        <xs:annotation>
            <xs:documentation>Email address type</xs:documentation>
        </xs:annotation>
        <xs:restriction base="xs:string">
            <xs:pattern value="[^@]+@[^@]+\\.[^@]+"/>
        </xs:restriction>
    </xs:simpleType>

</xs:schema>'''


@pytest.fixture
def simple_xsd_file(temp_dir: Path, simple_xsd_content: str) -> Path:
    """Create a simple XSD file for testing."""
    xsd_file = temp_dir / "test.xsd"
    xsd_file.write_text(simple_xsd_content, encoding='utf-8')
    return xsd_file


@pytest.fixture
def complex_xsd_content() -> str:
    """XSD with derivations, wildcards, identity constraints and composition."""
    return '''<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           xmlns:tns="http://example.com/complex"
           xmlns:doc="http://example.com/doc"
           targetNamespace="http://example.com/complex"
           elementFormDefault="qualified"
           blockDefault="#all"
           finalDefault="extension restriction"
           version="1.2"
           xml:lang="en">

    <xs:import namespace="http://www.w3.org/XML/1998/namespace"
               schemaLocation="http://www.w3.org/2001/xml.xsd"/>

    <xs:annotation doc:origin="generated">
        <xs:documentation source="http://example.com/guide" xml:lang="en">
            Complex <b>test</b> schema
        </xs:documentation>
        <xs:appinfo><tool version="2"/></xs:appinfo>
    </xs:annotation>

    <xs:complexType name="BaseType">
        <xs:sequence>
            <xs:element name="id" type="xs:string"/>
        </xs:sequence>
    </xs:complexType>

    <xs:complexType name="ExtendedType" abstract="true" block="extension">
        <xs:complexContent>
            <xs:extension base="tns:BaseType">
                <xs:sequence>
                    <xs:element name="extra" type="xs:string"/>
                    <xs:any namespace="##other" processContents="lax" minOccurs="0"/>
                </xs:sequence>
                <xs:attributeGroup ref="tns:commonAttributes"/>
                <xs:anyAttribute namespace="##any" processContents="skip"/>
            </xs:extension>
        </xs:complexContent>
    </xs:complexType>

    <xs:complexType name="PriceType">
        <xs:simpleContent>
            <xs:extension base="xs:decimal">
                <xs:attribute name="currency" type="tns:CurrencyType" default="EUR"/>
            </xs:extension>
        </xs:simpleContent>
    </xs:complexType>

    <xs:attributeGroup name="commonAttributes">
        <xs:attribute name="lang" type="xs:language"/>
        <xs:attribute name="status" use="optional">
            <xs:simpleType>
                <xs:restriction base="xs:token">
                    <xs:enumeration value="draft"/>
                    <xs:enumeration value="final"/>
                </xs:restriction>
            </xs:simpleType>
        </xs:attribute>
    </xs:attributeGroup>

    <xs:simpleType name="CurrencyType">
        <xs:restriction base="xs:string">
            <xs:length value="3" fixed="true"/>
            <xs:pattern value="[A-Z]{3}"/>
        </xs:restriction>
    </xs:simpleType>

    <xs:simpleType name="AmountType">
        <xs:restriction base="xs:decimal">
            <xs:minInclusive value="0"/>
            <xs:maxExclusive value="1000000"/>
            <xs:totalDigits value="9"/>
            <xs:fractionDigits value="2"/>
        </xs:restriction>
    </xs:simpleType>

    <xs:simpleType name="SizeType">
        <xs:union memberTypes="xs:positiveInteger tns:SizeNameType">
            <xs:simpleType>
                <xs:restriction base="xs:token">
                    <xs:whiteSpace value="collapse"/>
                </xs:restriction>
            </xs:simpleType>
        </xs:union>
    </xs:simpleType>

    <xs:simpleType name="SizeListType">
        <xs:list itemType="tns:SizeType"/>
    </xs:simpleType>

    <xs:group name="itemGroup">
        <xs:choice>
            <xs:element name="item" type="xs:string" maxOccurs="unbounded"/>
            <xs:element name="note" type="xs:string"/>
        </xs:choice>
    </xs:group>

    <xs:element name="root">
        <xs:complexType>
            <xs:choice minOccurs="0" maxOccurs="unbounded">
                <xs:element name="option1" type="xs:string"/>
                <xs:element name="option2" type="xs:int"/>
                <xs:group ref="tns:itemGroup"/>
                <xs:sequence>
                    <xs:element name="price" type="tns:PriceType"/>
                </xs:sequence>
            </xs:choice>
        </xs:complexType>
        <xs:key name="optionKey">
            <xs:selector xpath="tns:option1"/>
            <xs:field xpath="."/>
        </xs:key>
        <xs:keyref name="optionRef" refer="tns:optionKey">
            <xs:selector xpath="tns:option2"/>
            <xs:field xpath="@ref"/>
        </xs:keyref>
    </xs:element>

    <xs:notation name="jpeg" public="image/jpeg" system="viewer.exe"/>

</xs:schema>'''


@pytest.fixture
def complex_xsd_file(temp_dir: Path, complex_xsd_content: str) -> Path:
    """Create a complex XSD file for testing."""
    xsd_file = temp_dir / "complex.xsd"
    xsd_file.write_text(complex_xsd_content, encoding='utf-8')
    return xsd_file


@pytest.fixture
def meta_schema_file() -> Path:
    """The XML Schema 1.0 schema for schemas."""
    return TEST_CASES_DIR / "XMLSchema.xsd"


@pytest.fixture
def default_config() -> Config:
    """Default configuration for testing."""
    config = Config(input_file=None)
    config.logging.level = LogLevel.ERROR  # Suppress logs in tests
    return config


@pytest.fixture
def parser(default_config: Config) -> SchemaParser:
    """Schema parser with quiet logging."""
    return SchemaParser(default_config)
