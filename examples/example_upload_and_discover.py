import asyncio
import logging

from ipfsreg import RegistryConfig, TxOptions, open_registry_client

RPC_URL = "http://127.0.0.1:8545"  # node with an unlocked account
IPFS_API = "http://127.0.0.1:5001"  # local Kubo node
ACCOUNT = "0x1234567890123456789012345678901234567890"

config = RegistryConfig(
    window_size=1024,
    concurrency=4,
)


async def main():
    logging.basicConfig(level=logging.INFO)

    async with open_registry_client(RPC_URL, IPFS_API, config) as client:
        result = await client.upload_and_register(b"\x01\x02\x03", TxOptions(from_address=ACCOUNT, value=0))
        print(result)

        cids = await client.discover_cids(ACCOUNT)
        print(len(cids))
        print(cids[-5:])

        print(await client.fetch(result.uploaded_cid))


asyncio.run(main())
