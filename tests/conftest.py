import pytest

MDM_SAMPLE = "\n".join([
    "MSH|^~\\&|SendingApp|SendingFac|ReceivingApp|ReceivingFac|20240101120000||MDM^T02^MDM_T02|MSG001|P|2.5",
    "PID|1||123456789^^^MRN^MR||DOE^JOHN^MIDDLE||19800101|M|||123 MAIN ST^^CITY^ST^12345|||(555)123-4567",
    "PV1|1|I|ICU^101^A|||DOC001^SMITH^JANE^MD|||SUR|||||||||V123456789|||A",
    "TXA|1|DOC^Document^HL70019|TEXT^Plain Text^HL70019|20240101120000|DOC001^SMITH^JANE^MD|||20240101120000|||COMP^Complete^HL70272|DOC123456789",
    "OBX|1|TX|NOTE^Clinical Note^L||This is a sample clinical note.|||F",
    "OBX|2|TX|NOTE^Clinical Note^L||Patient is doing well.|||F",
])


@pytest.fixture
def mdm_sample():
    return MDM_SAMPLE
