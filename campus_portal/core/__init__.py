"""共享内核: 异常与基础类型, 不依赖 Flask."""
