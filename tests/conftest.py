"""Pytest fixtures for testing"""

import os

# Point settings at SQLite before the application modules read them
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

import pytest
from pathlib import Path
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from creditsea_gateway.api.main import create_app
from creditsea_gateway.api.dependencies import get_staging_area
from creditsea_gateway.infrastructure.database.models import Base
from creditsea_gateway.infrastructure.database.session import get_db
from creditsea_gateway.infrastructure.staging import StagingArea


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SAMPLE_REPORT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<CreditReport>
  <Applicant>
    <n>API Test User</n>
    <Telephone><Number>1234567890</Number></Telephone>
    <Identifier><PAN>TEST12345A</PAN></Identifier>
  </Applicant>
  <Score><Value>720</Value></Score>
  <Accounts>
    <Account>
      <AccountType>Credit Card</AccountType>
      <Institution>Test Bank</Institution>
      <AccountNumber>TEST123</AccountNumber>
      <Status>Active</Status>
      <CurrentBalance>25000</CurrentBalance>
      <AmountOverdue>0</AmountOverdue>
    </Account>
  </Accounts>
</CreditReport>
"""

EXPERIAN_REPORT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<INProfileResponse>
  <Current_Application>
    <Current_Application_Details>
      <Current_Applicant_Details>
        <Last_Name>Sharma</Last_Name>
        <First_Name>Sagar</First_Name>
        <Middle_Name1></Middle_Name1>
        <MobilePhoneNumber>9819137672</MobilePhoneNumber>
        <IncomeTaxPan>AOZPB0247S</IncomeTaxPan>
      </Current_Applicant_Details>
      <Current_Applicant_Address_Details>
        <FlatNoPlotHouseNo>Flat 12</FlatNoPlotHouseNo>
        <BldgNoSocietyName>Sunrise Apartments</BldgNoSocietyName>
        <RoadNoNameAreaLocality>MG Road</RoadNoNameAreaLocality>
        <City>Mumbai</City>
        <PINCode>400001</PINCode>
      </Current_Applicant_Address_Details>
    </Current_Application_Details>
  </Current_Application>
  <CAIS_Account>
    <CAIS_Summary>
      <Credit_Account>
        <CreditAccountTotal>4</CreditAccountTotal>
        <CreditAccountActive>3</CreditAccountActive>
        <CreditAccountDefault>0</CreditAccountDefault>
        <CreditAccountClosed>1</CreditAccountClosed>
      </Credit_Account>
      <Total_Outstanding_Balance>
        <Outstanding_Balance_Secured>85000</Outstanding_Balance_Secured>
        <Outstanding_Balance_UnSecured>160000</Outstanding_Balance_UnSecured>
        <Outstanding_Balance_All>245000</Outstanding_Balance_All>
      </Total_Outstanding_Balance>
    </CAIS_Summary>
    <CAIS_Account_DETAILS>
      <Subscriber_Name>ICICI Bank</Subscriber_Name>
      <Account_Number>XXXX4321</Account_Number>
      <Account_Type>10</Account_Type>
      <Account_Status>11</Account_Status>
      <Current_Balance>60000</Current_Balance>
      <Amount_Past_Due></Amount_Past_Due>
      <CAIS_Holder_Details>
        <Income_TAX_PAN>AOZPB0247S</Income_TAX_PAN>
      </CAIS_Holder_Details>
      <CAIS_Holder_Address_Details>
        <First_Line_Of_Address_non_normalized>Flat 12</First_Line_Of_Address_non_normalized>
        <City_non_normalized>Mumbai</City_non_normalized>
        <ZIP_Postal_Code_non_normalized>400001</ZIP_Postal_Code_non_normalized>
      </CAIS_Holder_Address_Details>
    </CAIS_Account_DETAILS>
    <CAIS_Account_DETAILS>
      <Subscriber_Name>HDFC Bank</Subscriber_Name>
      <Account_Number>HDFC0098</Account_Number>
      <Account_Type>51</Account_Type>
      <Account_Status>13</Account_Status>
      <Current_Balance>1,85,000</Current_Balance>
      <Amount_Past_Due>2500</Amount_Past_Due>
      <CAIS_Holder_Address_Details>
        <First_Line_Of_Address_non_normalized>22 Park Street</First_Line_Of_Address_non_normalized>
        <City_non_normalized>Kolkata</City_non_normalized>
      </CAIS_Holder_Address_Details>
    </CAIS_Account_DETAILS>
  </CAIS_Account>
  <TotalCAPS_Summary>
    <TotalCAPSLast7Days>2</TotalCAPSLast7Days>
  </TotalCAPS_Summary>
  <SCORE>
    <BureauScore>719</BureauScore>
  </SCORE>
</INProfileResponse>
"""


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    """Empty directory used as the upload staging area"""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def client(db: Session, staging_dir: Path) -> TestClient:
    """Create FastAPI test client with test database and staging directory"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_staging_area] = lambda: StagingArea(
        directory=str(staging_dir),
        max_bytes=1024 * 1024,
        chunk_bytes=4096,
    )
    return TestClient(app)


@pytest.fixture
def sample_report_xml() -> str:
    """Minimal single-account report in the simple CreditReport dialect"""
    return SAMPLE_REPORT_XML


@pytest.fixture
def experian_report_xml() -> str:
    """Two-account report in the Experian INProfileResponse dialect"""
    return EXPERIAN_REPORT_XML
