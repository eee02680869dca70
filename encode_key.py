import argparse
import base64
import getpass

def encode_api_key(key: str) -> str:
    return base64.b64encode(key.encode()).decode()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Encode a completion-service API key for the .env file.")
    parser.add_argument("key", nargs="?", help="API key; prompted for when omitted")
    args = parser.parse_args()

    raw_key = (args.key or getpass.getpass("Enter your OpenAI API key: ")).strip()
    print("Encoded key (copy this into your .env file):")
    print(f"AI_API_KEY_ENCODED={encode_api_key(raw_key)}")
