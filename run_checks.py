import os

os.environ.setdefault("USE_MOCK_DB", "true")
os.environ.setdefault("MOCK_DB_PATH", "")

from fastapi.testclient import TestClient
from abhaya.main import app

client = TestClient(app)

print('ROOT:')
print(client.get('/').json())

print('\nHEALTH:')
print(client.get('/health').json())

print('\nDB HEALTH:')
try:
    resp = client.get('/health/db')
    print(resp.status_code)
    try:
        print(resp.json())
    except Exception:
        print(resp.text)
except Exception as e:
    print('DB call raised exception:', e)

print('\nEMERGENCY ALERT (anonymous):')
resp = client.post('/alerts/emergency', json={'latitude': 17.3616, 'longitude': 78.4746})
print(resp.status_code, resp.json())

print('\nDASHBOARD without token (expect 401):')
print(client.get('/dashboard').status_code)
