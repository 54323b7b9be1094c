import time

DAY_MS = 1000 * 60 * 60 * 24


def now_ms():
    return int(time.time() * 1000)


def sample_projects():
    """Return a fresh copy of the seed dataset, dated relative to now."""
    now = now_ms()
    return [
        {
            "id": "sample_eth_token",
            "title": "Token Sale Smart Contract",
            "budget": "$1,200 - $2,500",
            "skills": "solidity,hardhat,security",
            "desc": "Create an audited ERC-20 token sale contract with vesting and whitelist. Deliver tests and deployment scripts.",
            "created": now - DAY_MS * 4,
            "owner": "0xAbC1234aBcD5678EfF0123456789aBcDEF012345",
        },
        {
            "id": "sample_nft_market",
            "title": "NFT Marketplace Frontend",
            "budget": "$800 - $1,800",
            "skills": "react,nextjs,ethers.js,ipfs",
            "desc": "Build a responsive marketplace (React) that connects to smart contracts, supports wallet connect and IPFS-hosted metadata.",
            "created": now - DAY_MS * 2,
            "owner": "0xDeF4567DeF8901AbC234567890abcDeF45678901",
        },
        {
            "id": "sample_audit",
            "title": "Smart Contract Security Audit (Small)",
            "budget": "$400 - $900",
            "skills": "security,solidity,manual-review",
            "desc": "Perform a security audit on 3 small contracts (<= 500 LOC). Provide report and remediation guidance.",
            "created": now - DAY_MS * 1,
            "owner": None,
        },
    ]
